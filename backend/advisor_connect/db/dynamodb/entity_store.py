from __future__ import annotations

from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Key

from ...errors import StorageError
from ...repositories.base_repository import EntityStore, merge_changes, stamp_new
from .errors import DdbConflict, DdbError
from .table import DynamoTable

_KEY_FIELDS = ("pk", "sk", "gsi1pk", "gsi1sk", "entityType")


def _type_pk(collection: str) -> str:
    return f"TYPE#{collection.upper()}"


def _from_ddb(value: Any) -> Any:
    # boto3 hands numbers back as Decimal.
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [_from_ddb(v) for v in value]
    if isinstance(value, dict):
        return {k: _from_ddb(v) for k, v in value.items()}
    return value


def _to_ddb(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, list):
        return [_to_ddb(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_ddb(v) for k, v in value.items()}
    return value


class DynamoEntityStore(EntityStore):
    """
    Single-table layout:
      pk     = <COLLECTION>#<id>
      sk     = RECORD
      gsi1pk = TYPE#<COLLECTION>, gsi1sk = <createdAt>#<id>  (listing)
    Ids come from an atomic counter item pk = COUNTER#<COLLECTION>.
    """

    def __init__(self, collection: str, *, table: DynamoTable):
        self.collection = str(collection)
        self._table = table

    def _key(self, id: int) -> dict[str, str]:
        return {"pk": f"{self.collection.upper()}#{int(id)}", "sk": "RECORD"}

    def _counter_key(self) -> dict[str, str]:
        return {"pk": f"COUNTER#{self.collection.upper()}", "sk": "COUNTER"}

    def _to_item(self, record: dict[str, Any]) -> dict[str, Any]:
        rid = int(record["id"])
        return {
            **_to_ddb(record),
            **self._key(rid),
            "entityType": self.collection,
            "gsi1pk": _type_pk(self.collection),
            "gsi1sk": f"{record.get('createdAt') or ''}#{rid:012d}",
        }

    @staticmethod
    def _to_record(item: dict[str, Any] | None) -> dict[str, Any] | None:
        if not item:
            return None
        return {k: _from_ddb(v) for k, v in item.items() if k not in _KEY_FIELDS}

    def _storage_error(self, op: str, e: DdbError) -> StorageError:
        return StorageError(
            message=f"Storage operation {op} failed for {self.collection}",
            operation=op,
            collection=self.collection,
            cause=e,
        )

    def get(self, id: int) -> dict[str, Any] | None:
        try:
            return self._to_record(self._table.get_item(key=self._key(id)))
        except DdbError as e:
            raise self._storage_error("get", e) from e

    def list(self) -> list[dict[str, Any]]:
        try:
            items = self._table.query_all(
                index_name="GSI1",
                key_condition_expression=Key("gsi1pk").eq(_type_pk(self.collection)),
            )
        except DdbError as e:
            raise self._storage_error("list", e) from e
        return [r for r in (self._to_record(it) for it in items) if r]

    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        try:
            new_id = self._table.add_to_counter(key=self._counter_key())
            record = stamp_new(entity, new_id=new_id)
            self._table.put_item(item=self._to_item(record), condition_expression="attribute_not_exists(pk)")
        except DdbError as e:
            raise self._storage_error("create", e) from e
        return record

    def update(self, id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        try:
            existing = self._to_record(self._table.get_item(key=self._key(id)))
            if existing is None:
                return None
            record = merge_changes(existing, changes)
            # Never resurrect a record deleted between the read and the write.
            self._table.put_item(item=self._to_item(record), condition_expression="attribute_exists(pk)")
        except DdbConflict:
            return None
        except DdbError as e:
            raise self._storage_error("update", e) from e
        return record

    def delete(self, id: int) -> bool:
        try:
            self._table.delete_item(key=self._key(id), condition_expression="attribute_exists(pk)")
        except DdbConflict:
            return False
        except DdbError as e:
            raise self._storage_error("delete", e) from e
        return True
