"""
catalog.py

Standard typeclasses and the TypeclassCatalog builder.

The standard typeclasses declare contracts. Where a sensible default exists
it is provided; everything else is a no-op stub that a concrete record is
expected to replace by binding its own operation before mixing in.

Default implementations read the record's data from its ``elements``
attribute, or treat the record itself as the collection when it has none
(e.g. a ``list`` or ``dict`` subclass).

Precondition graph of the standard catalog::

    Monoid <- Container <- Traversable <- Sequential <- Reversable
                                 ^                          ^
                                 +------ Foldable           |
                                            ^               |
                                            +-- TwoWayFoldable
    Comparable <- Ordered
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from capmix import functional
from capmix.mixin import CyclicPreconditionError, mixin
from capmix.surface import invoke
from capmix.typeclass import Typeclass

logger = logging.getLogger("capmix.catalog")


# =============================================================================
# Catalog Errors
# =============================================================================

class CatalogError(Exception):
    """
    Base class for errors raised while building a TypeclassCatalog.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "K000",
    ):
        self.message = message
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] Catalog error: {self.message}"


class UnknownTypeclassError(CatalogError):
    """Raised when a typeclass name is not defined in the catalog."""

    def __init__(self, name: str, known: Optional[List[str]] = None):
        self.name = name
        self.known = known or []
        message = f"Unknown typeclass '{name}'"
        if self.known:
            message += f". Known typeclasses: {', '.join(self.known)}"
        super().__init__(
            message=message,
            error_code="K001",
        )


class DuplicateTypeclassError(CatalogError):
    """Raised when a typeclass name is defined twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"Duplicate typeclass name: '{name}'",
            error_code="K002",
        )


# =============================================================================
# Default Implementations
# =============================================================================

def _elements(record: Any) -> Any:
    return getattr(record, "elements", record)


def _wrap(record: Any, *values: Any) -> List[Any]:
    return list(values)


def _unwrap(record: Any) -> Any:
    return functional.head(_elements(record))


def _empty(record: Any) -> List[Any]:
    return []


def _plus(record: Any, a: Any, b: Any) -> Any:
    return a or b


def _iterate(record: Any) -> Iterator[Any]:
    return iter(functional.values(_elements(record)))


def _items(record: Any) -> Iterator[Any]:
    elements = _elements(record)
    return iter(zip(functional.keys(elements), functional.values(elements)))


def _head(record: Any) -> Any:
    return functional.head(_elements(record))


def _tail(record: Any) -> Any:
    return functional.tail(_elements(record))


def _last(record: Any) -> Any:
    return functional.last(_elements(record))


def _init(record: Any) -> Any:
    return functional.init(_elements(record))


def _revert(record: Any) -> List[Any]:
    return functional.values(_elements(record))[::-1]


def _fold(record: Any, f: Callable[[Any, Any, Any], Any], acc: Any) -> Any:
    return functional.fold(_elements(record), f, acc)


def _foldl(record: Any, f: Callable[[Any, Any, Any], Any], acc: Any) -> Any:
    return invoke(record, "fold", f, acc)


def _foldr(record: Any, f: Callable[[Any, Any, Any], Any], acc: Any) -> Any:
    return functional.fold(invoke(record, "revert"), f, acc)


def _mixin(record: Any, *typeclasses: Typeclass) -> Any:
    return mixin(record, *typeclasses)


# =============================================================================
# Standard Typeclasses
# =============================================================================

Monad = Typeclass("Monad", {"wrap": _wrap, "unwrap": _unwrap})

Functor = Typeclass("Functor", {"__call__": None})

Monoid = Typeclass("Monoid", {"empty": _empty})

Container = Typeclass(
    "Container",
    {"__len__": None, "insert": None, "remove": None},
    [Monoid],
)

Applicative = Typeclass("Applicative", {})

MonadPlus = Typeclass("MonadPlus", {"plus": _plus})

Traversable = Typeclass(
    "Traversable",
    {"__iter__": _iterate, "items": _items},
    [Container],
    description="Ordered and associative traversal",
)

Sequential = Typeclass(
    "Sequential",
    {"head": _head, "tail": _tail, "last": _last, "init": _init},
    [Traversable],
)

Reversable = Typeclass("Reversable", {"revert": _revert}, [Sequential])

Foldable = Typeclass("Foldable", {"fold": _fold}, [Traversable])

TwoWayFoldable = Typeclass(
    "TwoWayFoldable",
    {"foldl": _foldl, "foldr": _foldr},
    [Foldable, Reversable],
)

Comparable = Typeclass("Comparable", {"__eq__": None})

Ordered = Typeclass("Ordered", {"__le__": None, "__lt__": None}, [Comparable])

Lazy = Typeclass("Lazy", {})

Arithmetic = Typeclass(
    "Arithmetic",
    {
        "__add__": None,
        "__sub__": None,
        "__truediv__": None,
        "__mul__": None,
        "__neg__": None,
    },
)

Serializable = Typeclass("Serializable", {"__str__": None})

Mixable = Typeclass("Mixable", {"mixin": _mixin})

Createable = Typeclass("Createable", {"create": None})

STANDARD_TYPECLASSES = (
    Monad,
    Functor,
    Monoid,
    Container,
    Applicative,
    MonadPlus,
    Traversable,
    Sequential,
    Reversable,
    Foldable,
    TwoWayFoldable,
    Comparable,
    Ordered,
    Lazy,
    Arithmetic,
    Serializable,
    Mixable,
    Createable,
)


# =============================================================================
# TypeclassCatalog
# =============================================================================

PreconditionRef = Union[str, Typeclass]


class TypeclassCatalog:
    """
    A registry of typeclasses addressable by name.

    Typeclasses can be added one at a time with ``define`` (preconditions
    must already be in the catalog) or in bulk with ``from_dict``, which
    accepts forward references and rejects cycles before building anything.

    Registered typeclasses are also reachable as attributes::

        catalog = standard_catalog()
        catalog.Foldable is catalog["Foldable"]
    """

    def __init__(self, typeclasses: Sequence[Typeclass] = ()):
        self._typeclasses: Dict[str, Typeclass] = {}
        for typeclass in typeclasses:
            self.register(typeclass)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, typeclass: Typeclass) -> Typeclass:
        """Add an existing Typeclass under its own name."""
        if not isinstance(typeclass, Typeclass):
            raise CatalogError(
                f"only Typeclass objects can be registered, got {type(typeclass).__name__}"
            )
        if typeclass.name in self._typeclasses:
            raise DuplicateTypeclassError(typeclass.name)
        self._typeclasses[typeclass.name] = typeclass
        logger.debug("Registered typeclass %s", typeclass.name)
        return typeclass

    def define(
        self,
        name: str,
        operations: Mapping[str, Optional[Callable[..., Any]]],
        preconditions: Sequence[PreconditionRef] = (),
        *,
        description: Optional[str] = None,
    ) -> Typeclass:
        """Construct a typeclass and register it. Preconditions may be names or Typeclass objects."""
        if isinstance(name, str) and name in self._typeclasses:
            raise DuplicateTypeclassError(name)
        resolved = [self._resolve(ref) for ref in preconditions]
        return self.register(Typeclass(name, operations, resolved, description=description))

    @classmethod
    def from_dict(
        cls,
        definitions: Mapping[str, Mapping[str, Any]],
        *,
        base: Optional["TypeclassCatalog"] = None,
    ) -> "TypeclassCatalog":
        """
        Build a catalog from plain data.

        ``definitions`` maps each typeclass name to ``{"operations": {...},
        "preconditions": [...], "description": ...}``. Preconditions name
        other entries of ``definitions`` or of ``base``, in any order.

        Raises:
            UnknownTypeclassError: a precondition names nothing.
            CyclicPreconditionError: the preconditions form a cycle.
        """
        catalog = cls(list(base) if base is not None else ())

        for name, entry in definitions.items():
            if not isinstance(entry, Mapping):
                raise CatalogError(f"entry '{name}' must be a mapping, got {type(entry).__name__}")
            if name in catalog:
                raise DuplicateTypeclassError(name)

        def refs(name: str) -> List[PreconditionRef]:
            return list(definitions[name].get("preconditions") or [])

        # Depth-first in definition order; a name seen again on the current path is a cycle.
        done: set = set()

        def visit(name: str, path: List[str]) -> None:
            if name in done or name in catalog:
                return
            if name in path:
                raise CyclicPreconditionError(path[path.index(name):] + [name])
            if name not in definitions:
                raise UnknownTypeclassError(name, sorted(set(definitions) | set(catalog.names())))
            for ref in refs(name):
                if isinstance(ref, str):
                    visit(ref, path + [name])
            entry = definitions[name]
            catalog.define(
                name,
                entry.get("operations"),
                refs(name),
                description=entry.get("description"),
            )
            done.add(name)

        for name in definitions:
            visit(name, [])
        return catalog

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _resolve(self, ref: PreconditionRef) -> Typeclass:
        if isinstance(ref, Typeclass):
            return ref
        return self.get(ref)

    def get(self, name: str) -> Typeclass:
        if name not in self._typeclasses:
            raise UnknownTypeclassError(name, self.names())
        return self._typeclasses[name]

    def names(self) -> List[str]:
        """Registered names in registration order."""
        return list(self._typeclasses)

    def __getitem__(self, name: str) -> Typeclass:
        return self.get(name)

    def __getattr__(self, name: str) -> Typeclass:
        typeclasses = self.__dict__.get("_typeclasses", {})
        if name in typeclasses:
            return typeclasses[name]
        raise AttributeError(f"{type(self).__name__} has no typeclass '{name}'")

    def __contains__(self, name: object) -> bool:
        return name in self._typeclasses

    def __iter__(self) -> Iterator[Typeclass]:
        return iter(self._typeclasses.values())

    def __len__(self) -> int:
        return len(self._typeclasses)

    def __repr__(self) -> str:
        return f"TypeclassCatalog({self.names()!r})"


def standard_catalog() -> TypeclassCatalog:
    """A new catalog holding every standard typeclass."""
    return TypeclassCatalog(STANDARD_TYPECLASSES)
