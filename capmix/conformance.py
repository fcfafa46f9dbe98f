"""
conformance.py

Structural conformance: does a record already expose a typeclass?

Conformance is decided by the record's capability surface alone. A record
conforms to a typeclass when its surface binds a callable under every
operation name the typeclass declares; how the bindings got there (mixin,
bind, attach_surface) and what the record's type is do not matter.

These checks never raise for any record and have no side effects.
"""

from typing import Any, Iterable, List

from capmix import functional
from capmix.surface import surface_of
from capmix.typeclass import Typeclass


def missing_operations(record: Any, typeclass: Typeclass) -> List[str]:
    """Sorted operation names of ``typeclass`` the record does not bind."""
    surface = surface_of(record)
    return [
        name for name in typeclass.required_operations()
        if not functional.has_function(surface, name)
    ]


def satisfies(record: Any, typeclass: Typeclass) -> bool:
    """
    True iff the record binds a callable for every operation of ``typeclass``.

    A record without a surface satisfies only typeclasses that declare no
    operations.
    """
    surface = surface_of(record)
    return functional.all(
        typeclass.required_operations(),
        lambda name, _index: functional.has_function(surface, name),
    )


def satisfies_all(record: Any, typeclasses: Iterable[Typeclass]) -> bool:
    """True iff the record satisfies every typeclass individually."""
    return functional.all(list(typeclasses), lambda typeclass, _index: satisfies(record, typeclass))
