"""
capmix — Runtime Typeclasses for Python Records
===============================================

capmix describes reusable capability sets ("typeclasses": named groups of
required operations) and composes them onto records at runtime, pulling in
every typeclass a requested one depends on.

Concepts
--------
- **Typeclass**: an immutable template of operation names, default
  implementations, and prerequisite typeclasses (preconditions).
- **Capability surface**: the per-record table of bound operations.
- **Conformance**: a record conforms to a typeclass when its surface binds
  a callable under every operation name the typeclass declares.
- **Mixin**: merges a typeclass (and its preconditions) onto a record
  without overwriting anything already bound.

What's Public
-------------
Everything exported in ``__all__``. Symbols prefixed with an underscore,
and the ``capmix.functional`` helpers not re-exported here, may change.

Example
-------
::

    from capmix import Foldable, bind, invoke, mixin, satisfies

    class Bag:
        def __init__(self, *elements):
            self.elements = list(elements)

    bag = mixin(Bag(1, 2, 3), Foldable)
    assert satisfies(bag, Foldable)
    invoke(bag, "fold", lambda acc, value, _key: acc + value, 0)   # 6
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API
# =============================================================================

__all__ = [
    # --- Package Metadata ---
    "__version__",

    # --- Typeclass Primitive ---
    "Typeclass",
    "stub",
    "is_stub",
    "TypeclassValidationError",
    "InvalidOperationError",
    "InvalidOperationsError",
    "InvalidPreconditionError",
    "TypeclassImmutabilityError",

    # --- Capability Surface ---
    "CapabilitySurface",
    "surface_of",
    "attach_surface",
    "bind",
    "invoke",
    "OperationNotBoundError",

    # --- Conformance ---
    "satisfies",
    "satisfies_all",
    "missing_operations",

    # --- Mixin Resolver ---
    "mixin",
    "MixinError",
    "InvalidArgumentError",
    "PreconditionUnsatisfiableError",
    "CyclicPreconditionError",

    # --- Catalog ---
    "TypeclassCatalog",
    "standard_catalog",
    "STANDARD_TYPECLASSES",
    "CatalogError",
    "UnknownTypeclassError",
    "DuplicateTypeclassError",
    "Monad",
    "Functor",
    "Monoid",
    "Container",
    "Applicative",
    "MonadPlus",
    "Traversable",
    "Sequential",
    "Reversable",
    "Foldable",
    "TwoWayFoldable",
    "Comparable",
    "Ordered",
    "Lazy",
    "Arithmetic",
    "Serializable",
    "Mixable",
    "Createable",

    # --- Singletons ---
    "SingletonRegistry",
    "singletons",
    "NotCreateableError",

    # --- Configuration ---
    "CapmixSettings",
    "get_settings",
    "reload_settings",
    "configure_logging",
]

# =============================================================================
# IMPORTS
# =============================================================================

from capmix.catalog import (
    STANDARD_TYPECLASSES,
    Applicative,
    Arithmetic,
    CatalogError,
    Comparable,
    Container,
    Createable,
    DuplicateTypeclassError,
    Foldable,
    Functor,
    Lazy,
    Mixable,
    Monad,
    MonadPlus,
    Monoid,
    Ordered,
    Reversable,
    Sequential,
    Serializable,
    Traversable,
    TwoWayFoldable,
    TypeclassCatalog,
    UnknownTypeclassError,
    standard_catalog,
)
from capmix.config import (
    CapmixSettings,
    configure_logging,
    get_settings,
    reload_settings,
)
from capmix.conformance import (
    missing_operations,
    satisfies,
    satisfies_all,
)
from capmix.mixin import (
    CyclicPreconditionError,
    InvalidArgumentError,
    MixinError,
    PreconditionUnsatisfiableError,
    mixin,
)
from capmix.singletons import (
    NotCreateableError,
    SingletonRegistry,
    singletons,
)
from capmix.surface import (
    CapabilitySurface,
    OperationNotBoundError,
    attach_surface,
    bind,
    invoke,
    surface_of,
)
from capmix.typeclass import (
    InvalidOperationError,
    InvalidOperationsError,
    InvalidPreconditionError,
    Typeclass,
    TypeclassImmutabilityError,
    TypeclassValidationError,
    is_stub,
    stub,
)
