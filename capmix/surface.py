"""
surface.py

Per-record capability surfaces.

A capability surface is the mutable table of operation name to
implementation that one record exposes. It is stored on the record itself,
under the attribute named by ``CapmixSettings.surface_attribute``, and so
lives exactly as long as the record does.

Operations are called with the record as their first argument, the way a
method receives ``self``::

    invoke(record, "fold", add, 0)   # surface["fold"](record, add, 0)
"""

from collections.abc import MutableMapping
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from capmix.config import get_settings
from capmix.typeclass import InvalidOperationError


class OperationNotBoundError(LookupError):
    """Raised when invoking an operation the record's surface does not bind."""

    def __init__(self, record: Any, name: str):
        self.record = record
        self.name = name
        self.error_code = "X004"
        super().__init__(
            f"[{self.error_code}] {type(record).__name__} has no operation '{name}' bound"
        )


class CapabilitySurface(MutableMapping):
    """
    Mapping of operation name to implementation, owned by one record.

    Behaves like a dict. Iteration follows binding order.
    """

    __slots__ = ('_bindings',)

    def __init__(self, bindings: Optional[Mapping[str, Callable[..., Any]]] = None):
        self._bindings: Dict[str, Callable[..., Any]] = {}
        if bindings:
            for name, implementation in bindings.items():
                self[name] = implementation

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._bindings[name]

    def __setitem__(self, name: str, implementation: Callable[..., Any]) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidOperationError(name, "name must be a non-empty string")
        if not callable(implementation):
            raise InvalidOperationError(
                name,
                f"implementation must be callable, got {type(implementation).__name__}",
            )
        self._bindings[name] = implementation

    def __delitem__(self, name: str) -> None:
        del self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def names(self) -> List[str]:
        """Sorted names of all bound operations."""
        return sorted(self._bindings)

    def __repr__(self) -> str:
        return f"CapabilitySurface({self.names()!r})"


def surface_of(record: Any) -> Optional[CapabilitySurface]:
    """Return the record's own capability surface, or None if it has none."""
    attribute = get_settings().surface_attribute
    try:
        # Instance attributes only; a surface on the record's class belongs to the class.
        candidate = vars(record).get(attribute)
    except TypeError:
        candidate = getattr(record, attribute, None)
        if candidate is getattr(type(record), attribute, None):
            candidate = None
    if isinstance(candidate, CapabilitySurface):
        return candidate
    return None


def attach_surface(record: Any, bindings: Optional[Mapping[str, Callable[..., Any]]] = None) -> CapabilitySurface:
    """
    Give the record a new capability surface holding ``bindings``.

    Raises TypeError if the record cannot carry attributes (e.g. ``int``) or
    already has a surface.
    """
    if surface_of(record) is not None:
        raise TypeError(f"{type(record).__name__} already has a capability surface")
    surface = CapabilitySurface(bindings)
    try:
        setattr(record, get_settings().surface_attribute, surface)
    except (AttributeError, TypeError) as e:
        raise TypeError(
            f"{type(record).__name__} cannot carry a capability surface: {e}"
        ) from e
    return surface


def bind(record: Any, name: str, implementation: Callable[..., Any]) -> Any:
    """
    Bind an operation on the record, creating its surface if needed.

    Unlike mixin, this overwrites an existing binding. Returns the record.
    """
    surface = surface_of(record)
    if surface is None:
        surface = attach_surface(record)
    surface[name] = implementation
    return record


def invoke(record: Any, name: str, *args: Any, **kwargs: Any) -> Any:
    """Call the operation bound under ``name`` with the record as first argument."""
    surface = surface_of(record)
    if surface is None or name not in surface:
        raise OperationNotBoundError(record, name)
    return surface[name](record, *args, **kwargs)
