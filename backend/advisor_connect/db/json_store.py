"""File-backed store: one JSON array per collection.

Every write reads the whole file, changes one record and writes the whole
array back. The last issued id lives in a `<collection>.seq` sidecar, so ids
of deleted records are never reused. A per-file lock keeps read-modify-write
cycles from interleaving inside one process; separate processes sharing the
directory still race (last write wins).
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import Any

import orjson

from ..errors import StorageError
from ..observability.logging import get_logger
from ..repositories.base_repository import EntityStore, coerce_id, merge_changes, stamp_new

log = get_logger("json_store")

_FILE_LOCKS: dict[str, threading.RLock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _FILE_LOCKS_GUARD:
        lock = _FILE_LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _FILE_LOCKS[key] = lock
        return lock


class JsonFileEntityStore(EntityStore):
    def __init__(self, collection: str, *, data_dir: str | os.PathLike[str]):
        self.collection = str(collection)
        self.path = Path(data_dir) / f"{self.collection}.json"
        self.seq_path = Path(data_dir) / f"{self.collection}.seq"
        self._lock = _lock_for(self.path)

    # --- file primitives ---

    def _read_all(self) -> list[dict[str, Any]]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(
                message=f"Could not read {self.collection}",
                operation="read",
                collection=self.collection,
                cause=e,
            ) from e

        if not raw.strip():
            return []

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise StorageError(
                message=f"Corrupt data file for {self.collection}",
                operation="read",
                collection=self.collection,
                cause=e,
            ) from e

        if not isinstance(data, list):
            raise StorageError(
                message=f"Data file for {self.collection} is not a JSON array",
                operation="read",
                collection=self.collection,
            )
        return [it for it in data if isinstance(it, dict)]

    def _read_last_id(self) -> int:
        try:
            raw = self.seq_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise StorageError(
                message=f"Could not read id sequence for {self.collection}",
                operation="read",
                collection=self.collection,
                cause=e,
            ) from e
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError as e:
            raise StorageError(
                message=f"Corrupt id sequence for {self.collection}",
                operation="read",
                collection=self.collection,
                cause=e,
            ) from e

    def _replace_file(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _write_all(self, items: list[dict[str, Any]], *, last_id: int | None = None) -> None:
        try:
            self._replace_file(self.path, orjson.dumps(items, option=orjson.OPT_INDENT_2))
            if last_id is not None:
                self._replace_file(self.seq_path, str(last_id).encode("utf-8"))
        except (OSError, TypeError) as e:
            log.error("json_store_write_failed", collection=self.collection, error=str(e))
            raise StorageError(
                message=f"Could not write {self.collection}",
                operation="write",
                collection=self.collection,
                cause=e,
            ) from e

    @staticmethod
    def _index_of(items: list[dict[str, Any]], id: int) -> int:
        for i, it in enumerate(items):
            if coerce_id(it.get("id")) == int(id):
                return i
        return -1

    # --- EntityStore ---

    def get(self, id: int) -> dict[str, Any] | None:
        items = self._read_all()
        idx = self._index_of(items, id)
        return items[idx] if idx >= 0 else None

    def list(self) -> list[dict[str, Any]]:
        return self._read_all()

    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            items = self._read_all()
            # The file max covers data written before the sidecar existed.
            highest = max((coerce_id(it.get("id")) or 0 for it in items), default=0)
            new_id = max(highest, self._read_last_id()) + 1
            item = stamp_new(entity, new_id=new_id)
            items.append(item)
            self._write_all(items, last_id=new_id)
            return dict(item)

    def update(self, id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            items = self._read_all()
            idx = self._index_of(items, id)
            if idx < 0:
                return None
            items[idx] = merge_changes(items[idx], changes)
            self._write_all(items)
            return dict(items[idx])

    def delete(self, id: int) -> bool:
        with self._lock:
            items = self._read_all()
            idx = self._index_of(items, id)
            if idx < 0:
                return False
            del items[idx]
            self._write_all(items)
            return True
