from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, eq=False)
class DdbError(Exception):
    """Base error for DynamoDB operations."""

    message: str
    operation: str | None = None
    table_name: str | None = None
    key: dict[str, Any] | None = None
    code: str | None = None
    retryable: bool = False
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True, eq=False)
class DdbConflict(DdbError):
    """A ConditionExpression did not hold."""


@dataclass(slots=True, eq=False)
class DdbThrottled(DdbError):
    pass


@dataclass(slots=True, eq=False)
class DdbUnavailable(DdbError):
    pass


@dataclass(slots=True, eq=False)
class DdbInternal(DdbError):
    pass
