"""
Entity store interface.

Every collection (users, opportunities, applications, connections) is served
through this narrow contract so that lifecycle code never depends on how the
records are persisted. Backends live under `advisor_connect.db`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

# Fields owned by the store; callers cannot overwrite them through update().
STORE_MANAGED_FIELDS = ("id", "createdAt")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def coerce_id(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def stamp_new(entity: dict[str, Any], *, new_id: int) -> dict[str, Any]:
    now = now_iso()
    item = {k: v for k, v in (entity or {}).items() if k not in STORE_MANAGED_FIELDS}
    return {"id": int(new_id), **item, "createdAt": now, "updatedAt": now}


def merge_changes(existing: dict[str, Any], changes: dict[str, Any]) -> dict[str, Any]:
    out = dict(existing)
    for k, v in (changes or {}).items():
        if k in STORE_MANAGED_FIELDS:
            continue
        out[k] = v
    out["updatedAt"] = now_iso()
    return out


class EntityStore(ABC):
    """Base store interface for one collection."""

    collection: str

    @abstractmethod
    def get(self, id: int) -> dict[str, Any] | None:
        """Get a record by id, or None."""

    @abstractmethod
    def list(self) -> list[dict[str, Any]]:
        """All records of the collection (no ordering guarantee)."""

    @abstractmethod
    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        """Persist a new record; assigns the next id and both timestamps."""

    @abstractmethod
    def update(self, id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Merge changes into a record and re-stamp updatedAt. None if absent."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Hard delete. False if the record did not exist."""
