"""
ordered_stack.py

A stack record built from standard typeclasses.

The stack binds the operations only it can implement (insert, remove,
size, comparison, rendering) and then mixes in TwoWayFoldable, Ordered
and Serializable. Mixin fills in everything else (empty, traversal,
head/tail, revert, fold, foldl, foldr) and leaves the stack's own bindings alone.

Use case: one shared stack per factory, via the singleton registry.
"""

from dataclasses import dataclass, field
from typing import Any, List

from capmix import (
    Createable,
    Ordered,
    Serializable,
    TwoWayFoldable,
    bind,
    invoke,
    mixin,
    singletons,
)


@dataclass(eq=False)
class Stack:
    """Stack data. Behavior lives on the capability surface."""
    elements: List[Any] = field(default_factory=list)


def _insert(stack: Stack, value: Any) -> Stack:
    stack.elements.append(value)
    return stack


def _remove(stack: Stack) -> Any:
    return stack.elements.pop()


def _size(stack: Stack) -> int:
    return len(stack.elements)


def _eq(stack: Stack, other: Stack) -> bool:
    return list(invoke(stack, "__iter__")) == list(invoke(other, "__iter__"))


def _le(stack: Stack, other: Stack) -> bool:
    return invoke(stack, "__len__") <= invoke(other, "__len__")


def _lt(stack: Stack, other: Stack) -> bool:
    return invoke(stack, "__len__") < invoke(other, "__len__")


def _render(stack: Stack) -> str:
    return "Stack(" + ", ".join(str(e) for e in stack.elements) + ")"


def new_stack(*values: Any) -> Stack:
    """Create a stack holding ``values`` (bottom first)."""
    stack = Stack(list(values))
    bind(stack, "insert", _insert)
    bind(stack, "remove", _remove)
    bind(stack, "__len__", _size)
    bind(stack, "__eq__", _eq)
    bind(stack, "__le__", _le)
    bind(stack, "__lt__", _lt)
    bind(stack, "__str__", _render)
    return mixin(stack, TwoWayFoldable, Ordered, Serializable)


class StackFactory:
    """Factory record; ``create`` builds an empty stack."""


def new_factory() -> StackFactory:
    factory = StackFactory()
    bind(factory, "create", lambda _factory: new_stack())
    return mixin(factory, Createable)


def shared_stack(factory: StackFactory) -> Stack:
    """The one stack shared by every user of ``factory``."""
    return singletons.get(factory)
