from __future__ import annotations

from typing import Any

from .client import table_resource
from .retry import ddb_call


class DynamoTable:
    """Thin wrapper over a boto3 Table with retry + error mapping on every call."""

    def __init__(self, *, table_name: str, resource: Any | None = None):
        self.table_name = str(table_name)
        self._table = resource if resource is not None else table_resource(self.table_name)

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any] | None:
        def _op():
            resp = self._table.get_item(Key=key, ConsistentRead=True)
            return resp.get("Item")

        return ddb_call("GetItem", _op, table_name=self.table_name, key=key)

    def put_item(self, *, item: dict[str, Any], condition_expression: str | None = None) -> None:
        def _op():
            kwargs: dict[str, Any] = {"Item": item}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            self._table.put_item(**kwargs)

        key = {"pk": item.get("pk"), "sk": item.get("sk")}
        ddb_call("PutItem", _op, table_name=self.table_name, key=key)

    def delete_item(self, *, key: dict[str, Any], condition_expression: str | None = None) -> None:
        def _op():
            kwargs: dict[str, Any] = {"Key": key}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression
            self._table.delete_item(**kwargs)

        ddb_call("DeleteItem", _op, table_name=self.table_name, key=key)

    def add_to_counter(self, *, key: dict[str, Any], attribute: str = "value", amount: int = 1) -> int:
        """Atomically add to a numeric attribute and return the new value."""

        def _op():
            resp = self._table.update_item(
                Key=key,
                UpdateExpression="ADD #v :n",
                ExpressionAttributeNames={"#v": attribute},
                ExpressionAttributeValues={":n": int(amount)},
                ReturnValues="UPDATED_NEW",
            )
            return (resp.get("Attributes") or {}).get(attribute)

        value = ddb_call("UpdateItem", _op, table_name=self.table_name, key=key)
        return int(value or 0)

    def query_all(self, *, key_condition_expression: Any, index_name: str | None = None) -> list[dict[str, Any]]:
        """Follow LastEvaluatedKey until the partition is exhausted."""
        out: list[dict[str, Any]] = []
        start_key: dict[str, Any] | None = None
        while True:
            def _op(lek=start_key):
                kwargs: dict[str, Any] = {"KeyConditionExpression": key_condition_expression}
                if index_name:
                    kwargs["IndexName"] = index_name
                # Only pass ExclusiveStartKey when present.
                if lek:
                    kwargs["ExclusiveStartKey"] = lek
                return self._table.query(**kwargs)

            resp = ddb_call("Query", _op, table_name=self.table_name)
            out.extend(resp.get("Items") or [])
            start_key = resp.get("LastEvaluatedKey")
            if not start_key:
                return out


def get_table(table_name: str) -> DynamoTable:
    return DynamoTable(table_name=table_name)
