"""
test_surface.py

Tests for capability surfaces and structural conformance.
"""

import pytest
from capmix import (
    CapabilitySurface,
    Foldable,
    InvalidArgumentError,
    InvalidOperationError,
    Monoid,
    OperationNotBoundError,
    Typeclass,
    attach_surface,
    bind,
    invoke,
    missing_operations,
    mixin,
    satisfies,
    satisfies_all,
    surface_of,
)


class Record:
    """A plain record with no capabilities."""


class SlottedRecord:
    __slots__ = ("value",)


def _fold(record, f, acc):
    return acc


# =============================================================================
# Surface Tests
# =============================================================================

class TestCapabilitySurface:
    """The per-record operation table."""

    def test_record_starts_without_surface(self):
        assert surface_of(Record()) is None

    def test_attach_surface(self):
        record = Record()
        surface = attach_surface(record, {"fold": _fold})
        assert surface_of(record) is surface
        assert surface["fold"] is _fold

    def test_attach_twice_rejected(self):
        record = Record()
        attach_surface(record)
        with pytest.raises(TypeError):
            attach_surface(record)

    def test_attach_to_unattributable_record_rejected(self):
        with pytest.raises(TypeError):
            attach_surface(42)
        with pytest.raises(TypeError):
            attach_surface(SlottedRecord())

    def test_surface_rejects_non_callables(self):
        surface = CapabilitySurface()
        with pytest.raises(InvalidOperationError):
            surface["fold"] = 3
        with pytest.raises(InvalidOperationError):
            surface[""] = _fold

    def test_surface_is_a_mapping(self):
        surface = CapabilitySurface({"b": _fold, "a": _fold})
        assert list(surface) == ["b", "a"]
        assert surface.names() == ["a", "b"]
        assert len(surface) == 2
        del surface["a"]
        assert "a" not in surface

    def test_class_level_surface_is_not_the_records(self):
        """A surface stored on the class is not an instance's own surface."""
        class Shared:
            pass

        attach_surface(Shared, {"fold": _fold})
        assert surface_of(Shared) is not None
        assert surface_of(Shared()) is None

    def test_class_level_surface_not_shared_by_slotted_instances(self):
        """Slotted instances never adopt, or write into, their class's surface."""
        class SlottedShared:
            __slots__ = ("value",)

        class_surface = attach_surface(SlottedShared, {"fold": _fold})
        assert surface_of(SlottedShared()) is None
        with pytest.raises(InvalidArgumentError):
            mixin(SlottedShared(), Monoid)
        assert not satisfies(SlottedShared(), Monoid)
        assert class_surface.names() == ["fold"]


class TestBindAndInvoke:
    """Explicit binding and calling through the surface."""

    def test_bind_creates_surface(self):
        record = bind(Record(), "fold", _fold)
        assert surface_of(record).names() == ["fold"]

    def test_bind_overwrites(self):
        record = bind(Record(), "fold", _fold)
        replacement = lambda r, f, acc: "replaced"  # noqa: E731
        bind(record, "fold", replacement)
        assert surface_of(record)["fold"] is replacement

    def test_invoke_passes_record_first(self):
        record = bind(Record(), "echo", lambda r, *args, **kwargs: (r, args, kwargs))
        assert invoke(record, "echo", 1, key="v") == (record, (1,), {"key": "v"})

    def test_invoke_unbound_operation(self):
        record = bind(Record(), "fold", _fold)
        with pytest.raises(OperationNotBoundError) as exc_info:
            invoke(record, "revert")
        assert exc_info.value.name == "revert"
        assert "X004" in str(exc_info.value)

    def test_invoke_without_surface(self):
        with pytest.raises(OperationNotBoundError):
            invoke(Record(), "fold")


# =============================================================================
# Conformance Tests
# =============================================================================

class TestConformance:
    """satisfies() is structural: only bound operation names matter."""

    def test_hand_assembled_record_satisfies_foldable(self):
        """Binding 'fold' by hand, without mixin, satisfies Foldable."""
        record = bind(Record(), "fold", _fold)
        assert satisfies(record, Foldable)

    def test_record_without_surface(self):
        """No surface satisfies only typeclasses without operations."""
        record = Record()
        assert not satisfies(record, Monoid)
        assert satisfies(record, Typeclass("Marker", {}))

    def test_non_object_records_never_raise(self):
        for record in (None, 42, "text", SlottedRecord()):
            assert not satisfies(record, Foldable)

    def test_partial_surface_does_not_satisfy(self):
        two = Typeclass("Two", {"a": None, "b": None})
        record = bind(Record(), "a", _fold)
        assert not satisfies(record, two)
        assert missing_operations(record, two) == ["b"]

    def test_names_must_match_exactly(self):
        record = bind(Record(), "Fold", _fold)
        assert not satisfies(record, Foldable)

    def test_satisfies_does_not_modify_record(self):
        record = Record()
        satisfies(record, Foldable)
        assert surface_of(record) is None

    def test_satisfies_all(self):
        record = bind(bind(Record(), "fold", _fold), "empty", lambda r: [])
        assert satisfies_all(record, [Foldable, Monoid])
        assert not satisfies_all(record, [Foldable, Typeclass("Other", {"x": None})])
        assert satisfies_all(record, [])
