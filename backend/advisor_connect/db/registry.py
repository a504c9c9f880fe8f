from __future__ import annotations

import threading

from ..repositories.base_repository import EntityStore
from ..settings import STORAGE_BACKENDS, settings

USERS = "users"
OPPORTUNITIES = "opportunities"
APPLICATIONS = "applications"
CONNECTIONS = "connections"

COLLECTIONS = (USERS, OPPORTUNITIES, APPLICATIONS, CONNECTIONS)

_STORES: dict[str, EntityStore] = {}
_GUARD = threading.Lock()


def _build_store(collection: str) -> EntityStore:
    backend = settings.normalized_storage_backend
    if backend == "memory":
        from .memory_store import MemoryEntityStore

        return MemoryEntityStore(collection)
    if backend == "json":
        from .json_store import JsonFileEntityStore

        return JsonFileEntityStore(collection, data_dir=settings.data_dir)
    if backend == "dynamodb":
        from .dynamodb.entity_store import DynamoEntityStore
        from .dynamodb.table import get_table

        if not settings.ddb_table_name:
            raise RuntimeError("DDB_TABLE_NAME is not set")
        return DynamoEntityStore(collection, table=get_table(settings.ddb_table_name))
    raise RuntimeError(
        f"Unsupported STORAGE_BACKEND {settings.storage_backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
    )


def get_store(collection: str) -> EntityStore:
    if collection not in COLLECTIONS:
        raise ValueError(f"unknown collection: {collection}")
    with _GUARD:
        store = _STORES.get(collection)
        if store is None:
            store = _build_store(collection)
            _STORES[collection] = store
        return store


def set_store(collection: str, store: EntityStore) -> None:
    """Install a store explicitly (tests, seed scripts)."""
    with _GUARD:
        _STORES[collection] = store


def reset_stores() -> None:
    with _GUARD:
        _STORES.clear()
