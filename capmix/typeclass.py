"""
typeclass.py

capmix Typeclass Primitive

A Typeclass is a named, immutable template describing a capability set:
- Which operations a record must expose (by name)
- A default implementation for each of them
- Which other typeclasses must already be present (preconditions)

Design Invariants:
- Immutable after creation
- Operations are keyed by non-empty strings and bound to callables
- Defaults are never written to after construction; mixin copies out of them
- Preconditions form a DAG (a typeclass can only reference typeclasses that
  already exist, so construction alone cannot introduce a cycle)
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

STUB_MARKER = "__capmix_stub__"


# =============================================================================
# Typeclass Errors
# =============================================================================

class TypeclassValidationError(Exception):
    """
    Raised when a Typeclass cannot be constructed due to validation failure.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "T000",
    ):
        self.message = message
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] Typeclass validation failed: {self.message}"


class InvalidOperationError(TypeclassValidationError):
    """Raised when an operation name or implementation is invalid."""

    def __init__(self, name: Any, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(
            message=f"Invalid operation {name!r}: {reason}",
            error_code="T001",
        )


class InvalidOperationsError(TypeclassValidationError):
    """Raised when the operations field is missing or not a mapping."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            message=f"Invalid operations: {reason}",
            error_code="T002",
        )


class InvalidPreconditionError(TypeclassValidationError):
    """Raised when a precondition is not a Typeclass."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(
            message=f"Invalid precondition at index {index}: {reason}",
            error_code="T003",
        )


class TypeclassImmutabilityError(Exception):
    """Raised when attempting to mutate an immutable Typeclass."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Cannot {operation}: Typeclass is immutable after creation"
        )


# =============================================================================
# Helper Functions
# =============================================================================

def _validate_string(value: Any, field_name: str) -> str:
    """Validate that a value is a non-empty string."""
    if not isinstance(value, str):
        raise TypeclassValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            error_code="T008",
        )
    if not value.strip():
        raise TypeclassValidationError(
            f"{field_name} cannot be empty or whitespace-only",
            error_code="T008",
        )
    return value


def stub(name: str) -> Callable[..., None]:
    """Create a no-op default for an operation that has no real default."""
    def _stub(*args: Any, **kwargs: Any) -> None:
        return None

    _stub.__name__ = name
    _stub.__qualname__ = f"stub.{name}"
    setattr(_stub, STUB_MARKER, True)
    return _stub


def is_stub(implementation: Any) -> bool:
    """True if the implementation is a no-op placeholder created by stub()."""
    return getattr(implementation, STUB_MARKER, False) is True


def _validate_operations(operations: Any) -> Dict[str, Callable[..., Any]]:
    """Validate an operations mapping and return a private copy of it."""
    if operations is None:
        raise InvalidOperationsError("operations are required")
    if not isinstance(operations, Mapping):
        raise InvalidOperationsError(
            f"must be a mapping of name to callable, got {type(operations).__name__}"
        )

    validated: Dict[str, Callable[..., Any]] = {}
    for name, implementation in operations.items():
        if not isinstance(name, str) or not name.strip():
            raise InvalidOperationError(name, "name must be a non-empty string")
        if implementation is None:
            implementation = stub(name)
        elif not callable(implementation):
            raise InvalidOperationError(
                name,
                f"implementation must be callable, got {type(implementation).__name__}",
            )
        validated[name] = implementation
    return validated


# =============================================================================
# Typeclass
# =============================================================================

class Typeclass:
    """
    A named capability set: required operation names with defaults.

    Typeclasses are templates. They are never mixed into; records receive
    copies of their defaults through ``capmix.mixin``.

    Attributes:
        name: Typeclass identifier
        operations: Read-only mapping of operation name to default implementation
        preconditions: Typeclasses that must be present before this one
        description: Optional human-readable description
    """

    __slots__ = (
        '_name',
        '_operations',
        '_preconditions',
        '_description',
        '_frozen',
    )

    def __init__(
        self,
        name: str,
        operations: Mapping[str, Optional[Callable[..., Any]]],
        preconditions: Optional[Sequence["Typeclass"]] = None,
        *,
        description: Optional[str] = None,
    ):
        name = _validate_string(name, "name")
        validated_operations = _validate_operations(operations)

        parsed_preconditions: List[Typeclass] = []
        if preconditions is not None:
            if isinstance(preconditions, (str, bytes, Mapping)) or not isinstance(preconditions, Sequence):
                raise InvalidPreconditionError(
                    0,
                    f"preconditions must be a sequence of Typeclass, got {type(preconditions).__name__}",
                )
            for i, pre in enumerate(preconditions):
                if not isinstance(pre, Typeclass):
                    raise InvalidPreconditionError(
                        i,
                        f"must be Typeclass, got {type(pre).__name__}",
                    )
                parsed_preconditions.append(pre)

        if description is not None and not isinstance(description, str):
            raise TypeclassValidationError(
                f"description must be a string, got {type(description).__name__}",
                error_code="T008",
            )

        object.__setattr__(self, '_name', name)
        object.__setattr__(self, '_operations', MappingProxyType(validated_operations))
        object.__setattr__(self, '_preconditions', tuple(parsed_preconditions))
        object.__setattr__(self, '_description', description)
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise TypeclassImmutabilityError(f"set attribute '{name}'")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if getattr(self, '_frozen', False):
            raise TypeclassImmutabilityError(f"delete attribute '{name}'")
        object.__delattr__(self, name)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def operations(self) -> Mapping[str, Callable[..., Any]]:
        """Read-only view of the default implementations."""
        return self._operations

    @property
    def preconditions(self) -> Tuple["Typeclass", ...]:
        return self._preconditions

    @property
    def description(self) -> Optional[str]:
        return self._description

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def required_operations(self) -> List[str]:
        """Sorted names of the operations a conforming record must bind."""
        return sorted(self._operations)

    def has_operation(self, name: str) -> bool:
        return name in self._operations

    def default(self, name: str) -> Callable[..., Any]:
        """Default implementation for an operation. Raises KeyError if undeclared."""
        return self._operations[name]

    def closure(self) -> List["Typeclass"]:
        """
        This typeclass and all of its transitive preconditions.

        Returned in resolution order: each typeclass appears after all of
        its own preconditions, and only once.
        """
        ordered: List[Typeclass] = []
        seen = set()

        def visit(typeclass: Typeclass) -> None:
            if id(typeclass) in seen:
                return
            seen.add(id(typeclass))
            for pre in typeclass.preconditions:
                visit(pre)
            ordered.append(typeclass)

        visit(self)
        return ordered

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        """Return count of operations."""
        return len(self._operations)

    def __iter__(self) -> Iterator[str]:
        """Iterate over operation names."""
        return iter(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Describe the typeclass by names only (implementations are not data)."""
        result: Dict[str, Any] = {
            "name": self._name,
            "operations": self.required_operations(),
            "preconditions": [p.name for p in self._preconditions],
        }
        if self._description is not None:
            result["description"] = self._description
        return result

    # -------------------------------------------------------------------------
    # String Representations
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Typeclass(name={self._name!r}, "
            f"operations={self.required_operations()!r}, "
            f"preconditions={[p.name for p in self._preconditions]!r})"
        )

    def __str__(self) -> str:
        return self._name
