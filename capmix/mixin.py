"""
mixin.py

capmix Mixin Resolver

Composes typeclasses onto a record's capability surface.

For every requested typeclass the resolver:
1. Resolves preconditions. If the record does not yet satisfy each of the
   typeclass's preconditions, every precondition is mixed in first, in the
   order listed, recursively.
2. Installs the typeclass's defaults. A record without a surface gets a new
   one holding copies of all defaults; a record with a surface only gains
   the operations it does not bind yet.

Design Invariants:
- First-bound-wins: an existing binding is never overwritten
- Idempotent: mixing the same typeclass in twice changes nothing
- Typeclass defaults are never shared mutably with a record
- A precondition cycle fails fast instead of recursing forever
"""

import logging
from types import BuiltinFunctionType, FunctionType, MethodType
from typing import Any, Callable, List, Sequence, Tuple

from capmix import functional
from capmix.config import get_settings
from capmix.conformance import satisfies_all
from capmix.surface import attach_surface, surface_of
from capmix.typeclass import Typeclass

logger = logging.getLogger("capmix.mixin")

# Bound by reference; anything else callable is deep copied.
_SHARED_CALLABLE_TYPES = (FunctionType, BuiltinFunctionType, MethodType, type)


# =============================================================================
# Mixin Errors
# =============================================================================

class MixinError(Exception):
    """
    Base class for errors raised while composing typeclasses onto a record.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "X000",
    ):
        self.message = message
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] Mixin failed: {self.message}"


class InvalidArgumentError(MixinError):
    """Raised when mixin is called without typeclasses, with a non-typeclass, or on a record that cannot hold a surface."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            message=reason,
            error_code="X001",
        )


class PreconditionUnsatisfiableError(MixinError):
    """Raised when a typeclass's preconditions cannot be resolved."""

    def __init__(self, typeclass_name: str, reason: str, *, error_code: str = "X002"):
        self.typeclass_name = typeclass_name
        self.reason = reason
        super().__init__(
            message=f"Preconditions of '{typeclass_name}' cannot be satisfied: {reason}",
            error_code=error_code,
        )


class CyclicPreconditionError(PreconditionUnsatisfiableError):
    """Raised when typeclass preconditions form a cycle."""

    def __init__(self, cycle_path: List[str]):
        self.cycle_path = cycle_path
        path_str = " -> ".join(cycle_path)
        super().__init__(
            cycle_path[0],
            f"cyclic preconditions detected: {path_str}",
            error_code="X003",
        )


# =============================================================================
# Helper Functions
# =============================================================================

def _copy_implementation(implementation: Callable[..., Any]) -> Callable[..., Any]:
    """Plain functions are shared; composite callables get their own deep copy."""
    if isinstance(implementation, _SHARED_CALLABLE_TYPES):
        return implementation
    return functional.deep_copy(implementation)


def _check_path(typeclass: Typeclass, path: Tuple[Typeclass, ...]) -> None:
    """Fail if ``typeclass`` is already being resolved further up, or the chain is too deep."""
    for index, ancestor in enumerate(path):
        if ancestor is typeclass:
            raise CyclicPreconditionError([t.name for t in path[index:]] + [typeclass.name])

    max_depth = get_settings().max_resolution_depth
    if len(path) >= max_depth:
        raise PreconditionUnsatisfiableError(
            typeclass.name,
            f"precondition chain deeper than {max_depth}",
        )


def _mixin_single(record: Any, typeclass: Typeclass, path: Tuple[Typeclass, ...]) -> None:
    _check_path(typeclass, path)

    # Bound preconditions can still have unsatisfied preconditions of their own.
    if typeclass.preconditions and not satisfies_all(record, typeclass.closure()[:-1]):
        logger.debug(
            "Resolving preconditions of %s: %s",
            typeclass.name,
            [p.name for p in typeclass.preconditions],
        )
        for precondition in typeclass.preconditions:
            _mixin_single(record, precondition, path + (typeclass,))

    surface = surface_of(record)
    if surface is None:
        try:
            attach_surface(
                record,
                functional.map(typeclass.operations, lambda impl, _name: _copy_implementation(impl)),
            )
        except TypeError as e:
            raise InvalidArgumentError(str(e)) from e
        logger.debug("Installed %s on %s: %s", typeclass.name, type(record).__name__, typeclass.required_operations())
        return

    bound, preserved = functional.merge_missing(surface, typeclass.operations, _copy_implementation)
    logger.debug(
        "Mixed %s into %s: bound=%s preserved=%s",
        typeclass.name,
        type(record).__name__,
        bound,
        preserved,
    )


# =============================================================================
# Public API
# =============================================================================

def mixin(record: Any, *typeclasses: Typeclass) -> Any:
    """
    Mix one or more typeclasses, with their preconditions, into ``record``.

    Typeclasses are applied in the order given; when two declare the same
    operation, the first one applied wins. Returns the same record.

    Raises:
        InvalidArgumentError: no typeclasses given, an argument is not a
            Typeclass, or the record cannot carry a capability surface.
        PreconditionUnsatisfiableError: the precondition graph is cyclic or
            deeper than ``max_resolution_depth``.
    """
    _validate_arguments(typeclasses)
    for typeclass in typeclasses:
        _mixin_single(record, typeclass, ())
    return record


def _validate_arguments(typeclasses: Sequence[Any]) -> None:
    if not typeclasses:
        raise InvalidArgumentError("mixin requires at least one typeclass")
    for i, typeclass in enumerate(typeclasses):
        if not isinstance(typeclass, Typeclass):
            raise InvalidArgumentError(
                f"argument {i} must be Typeclass, got {type(typeclass).__name__}"
            )
