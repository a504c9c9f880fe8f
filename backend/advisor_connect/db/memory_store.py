from __future__ import annotations

import copy
import threading
from typing import Any

from ..repositories.base_repository import EntityStore, merge_changes, stamp_new


class MemoryEntityStore(EntityStore):
    """Process-local store. Used by the test suite and throwaway demos."""

    def __init__(self, collection: str, records: list[dict[str, Any]] | None = None):
        self.collection = str(collection)
        self._lock = threading.RLock()
        self._items: dict[int, dict[str, Any]] = {}
        for r in records or []:
            self._items[int(r["id"])] = copy.deepcopy(r)
        # High-water mark; ids of deleted records are never handed out again.
        self._last_id = max(self._items.keys(), default=0)

    def get(self, id: int) -> dict[str, Any] | None:
        with self._lock:
            it = self._items.get(int(id))
            return copy.deepcopy(it) if it else None

    def list(self) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(it) for it in self._items.values()]

    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            self._last_id += 1
            new_id = self._last_id
            item = stamp_new(entity, new_id=new_id)
            self._items[new_id] = item
            return copy.deepcopy(item)

    def update(self, id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            existing = self._items.get(int(id))
            if existing is None:
                return None
            item = merge_changes(existing, changes)
            self._items[int(id)] = item
            return copy.deepcopy(item)

    def delete(self, id: int) -> bool:
        with self._lock:
            return self._items.pop(int(id), None) is not None
