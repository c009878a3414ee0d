"""Type/schema cache.

Records which tree paths have been materialized and the last type observed
for each leaf. The cache is owned by a single engine instance and lives for
the whole process; entries only disappear through :meth:`SchemaCache.purge_prefix`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pystatetree._json import scalar_text
from pystatetree.models.node import ValueType

_logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    created: bool = False
    value_type: ValueType | None = None
    labels: dict[str, Any] | None = Field(default=None)


class SchemaCache:
    """In-memory record of created paths, their types and label sets.

    Callers that check-then-create a path must hold :meth:`lock` for that
    path so concurrent walks neither double-create nor double-widen.
    """

    def __init__(self) -> None:
        self._created: set[str] = set()
        self._types: dict[str, ValueType] = {}
        self._labels: dict[str, dict[str, Any]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._created

    def __len__(self) -> int:
        return len(self._created)

    def paths(self) -> list[str]:
        return sorted(self._created)

    def get(self, path: str) -> CacheEntry:
        labels = self._labels.get(path)
        return CacheEntry(
            created=path in self._created,
            value_type=self._types.get(path),
            labels=dict(labels) if labels is not None else None,
        )

    def is_created(self, path: str) -> bool:
        return path in self._created

    def value_type(self, path: str) -> ValueType | None:
        """Stored leaf type of *path*; ``None`` for containers and unknown paths."""
        return self._types.get(path)

    def lock(self, path: str) -> asyncio.Lock:
        lock = self._locks.get(path)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[path] = lock
        return lock

    def record_create(
        self,
        path: str,
        value_type: ValueType | None = None,
        labels: dict[str, Any] | None = None,
    ) -> None:
        self._created.add(path)
        if value_type is not None:
            self._types[path] = value_type
        if labels is not None:
            self._labels[path] = dict(labels)

    def widen(self, path: str, observed: ValueType) -> ValueType:
        """Return the effective type of *path* after observing *observed*.

        A conflict with the stored type yields ``mixed``; ``mixed`` never
        narrows back. Nothing is stored here, see :meth:`record_create`.
        """
        current = self._types.get(path)
        if current is None:
            return observed
        if current != observed:
            if current != ValueType.MIXED:
                _logger.debug("Type changed for %s from %s to %s", path, current, ValueType.MIXED)
            return ValueType.MIXED
        return current

    def conflicts(self, path: str, observed: ValueType) -> bool:
        """True when *observed* would widen a concrete stored type."""
        current = self._types.get(path)
        return current is not None and current != ValueType.MIXED and current != observed

    def merge_labels(
        self,
        path: str,
        seed: dict[str, Any] | None,
        value: Any,
    ) -> tuple[dict[str, Any] | None, bool]:
        """Grow the label set of *path* with *value*.

        Returns the merged labels (``None`` when neither a seed nor earlier
        labels exist) and whether anything was added. Existing labels are
        never overwritten.
        """
        current = self._labels.get(path)
        if current is None and not seed:
            return None, False
        merged = dict(current) if current is not None else {}
        changed = current is None
        for raw, label in (seed or {}).items():
            if raw not in merged:
                merged[raw] = label
                changed = True
        raw_value = scalar_text(value)
        if raw_value not in merged:
            merged[raw_value] = value
            changed = True
        return merged, changed

    def purge_prefix(self, path: str) -> int:
        """Drop every entry whose path starts with *path*; return how many."""
        known = self._created | self._types.keys() | self._labels.keys()
        doomed = [key for key in known if key.startswith(path)]
        purged = 0
        for key in doomed:
            if key in self._created:
                self._created.discard(key)
                purged += 1
            self._types.pop(key, None)
            self._labels.pop(key, None)
        # A lock still held belongs to the caller doing the purge.
        for key in [key for key, lock in self._locks.items() if key.startswith(path) and not lock.locked()]:
            del self._locks[key]
        return purged
