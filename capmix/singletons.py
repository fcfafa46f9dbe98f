"""
singletons.py

Single-instance registry for Createable records.

A record becomes a singleton factory by calling ``singletons.get(record)``:
the record's ``create`` operation runs once, and from then on
``invoke(record, "create")`` returns that same instance. ``reset`` restores
the original ``create`` so the next ``get`` builds a fresh instance.

Entries are keyed by record identity, never by equality.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

from capmix.catalog import Createable
from capmix.conformance import missing_operations, satisfies
from capmix.surface import surface_of

logger = logging.getLogger("capmix.singletons")


class NotCreateableError(Exception):
    """Raised when a singleton is requested for a record that cannot create instances."""

    def __init__(self, record: Any):
        self.record = record
        self.error_code = "S001"
        self.missing = missing_operations(record, Createable)
        super().__init__(
            f"[{self.error_code}] {type(record).__name__} is not Createable; "
            f"missing operations: {', '.join(self.missing)}"
        )


@dataclass
class _Entry:
    record: Any
    original_create: Callable[..., Any]
    instance: Any


class SingletonRegistry:
    """Process-wide single instances, one per factory record."""

    def __init__(self):
        self._entries: Dict[int, _Entry] = {}

    def get(self, record: Any) -> Any:
        """Return the record's single instance, creating it on first use."""
        entry = self._entries.get(id(record))
        if entry is not None:
            return entry.instance

        if not satisfies(record, Createable):
            raise NotCreateableError(record)

        surface = surface_of(record)
        original_create = surface["create"]
        instance = original_create(record)
        self._entries[id(record)] = _Entry(record, original_create, instance)
        surface["create"] = lambda owner, *args, **kwargs: self.get(owner)
        logger.debug("Created singleton for %s", type(record).__name__)
        return instance

    def reset(self, record: Any) -> None:
        """Forget the record's instance and restore its original create. No-op if unknown."""
        entry = self._entries.pop(id(record), None)
        if entry is None:
            return
        surface = surface_of(record)
        if surface is not None:
            surface["create"] = entry.original_create
        logger.debug("Reset singleton for %s", type(record).__name__)

    def reset_all(self) -> None:
        for entry in list(self._entries.values()):
            self.reset(entry.record)

    def __contains__(self, record: object) -> bool:
        return id(record) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


singletons = SingletonRegistry()
