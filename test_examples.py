"""
test_examples.py

Integration tests for the example records.
Proves the standard typeclasses compose into a working data type.
"""

from capmix import (
    Comparable,
    Container,
    Monoid,
    Sequential,
    TwoWayFoldable,
    invoke,
    satisfies,
    singletons,
)
from examples.ordered_stack import new_factory, new_stack, shared_stack


def _collect(acc, value, _key):
    return acc + [value]


class TestOrderedStack:
    """A stack that binds its own operations and mixes in the rest."""

    def test_stack_conforms_to_everything_requested(self):
        stack = new_stack(1, 2)
        for typeclass in (TwoWayFoldable, Sequential, Container, Monoid, Comparable):
            assert satisfies(stack, typeclass), typeclass.name

    def test_own_operations_preserved(self):
        stack = new_stack(1, 2)
        invoke(stack, "insert", 3)
        assert invoke(stack, "__len__") == 3
        assert invoke(stack, "remove") == 3
        assert str(invoke(stack, "__str__")) == "Stack(1, 2)"

    def test_mixed_in_operations_use_stack_data(self):
        stack = new_stack("a", "b", "c")
        assert invoke(stack, "head") == "a"
        assert invoke(stack, "last") == "c"
        assert invoke(stack, "foldl", _collect, []) == ["a", "b", "c"]
        assert invoke(stack, "foldr", _collect, []) == ["c", "b", "a"]

    def test_ordering(self):
        small = new_stack(1)
        large = new_stack(1, 2)
        assert invoke(small, "__lt__", large)
        assert invoke(small, "__le__", small)
        assert invoke(small, "__eq__", new_stack(1))
        assert not invoke(small, "__eq__", large)


class TestSharedStack:
    """One stack per factory through the singleton registry."""

    def test_shared_stack_is_shared(self):
        factory = new_factory()
        try:
            stack = shared_stack(factory)
            invoke(stack, "insert", "x")
            assert shared_stack(factory) is stack
            assert invoke(factory, "create") is stack
        finally:
            singletons.reset(factory)

    def test_factories_do_not_share(self):
        a, b = new_factory(), new_factory()
        try:
            assert shared_stack(a) is not shared_stack(b)
        finally:
            singletons.reset_all()
