from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .errors import DdbConflict, DdbError, DdbInternal, DdbThrottled, DdbUnavailable

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 4
    base_delay_s: float = 0.05
    max_delay_s: float = 1.0


_THROTTLE_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
}

_ACCESS_CODES = {"AccessDeniedException", "UnrecognizedClientException", "ResourceNotFoundException"}


def _backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    # Full jitter exponential backoff.
    ceiling = min(policy.max_delay_s, policy.base_delay_s * (2 ** max(0, attempt - 1)))
    return random.random() * ceiling


def map_error(*, operation: str, table_name: str | None, key: dict[str, Any] | None, exc: Exception) -> DdbError:
    if isinstance(exc, DdbError):
        return exc

    ctx = {"operation": operation, "table_name": table_name, "key": key, "cause": exc}

    if isinstance(exc, ClientError):
        code = str(((exc.response or {}).get("Error") or {}).get("Code") or "")
        if code == "ConditionalCheckFailedException":
            return DdbConflict(message="DynamoDB conditional check failed", code=code, **ctx)
        if code in _THROTTLE_CODES:
            return DdbThrottled(message="DynamoDB request throttled", code=code, retryable=True, **ctx)
        if code in _ACCESS_CODES:
            return DdbUnavailable(message="DynamoDB table unavailable", code=code, **ctx)
        return DdbInternal(message=f"DynamoDB request failed ({code or 'ClientError'})", code=code or None, **ctx)

    if isinstance(exc, BotoCoreError):
        return DdbUnavailable(message="DynamoDB client error", retryable=True, **ctx)

    return DdbInternal(message="Unexpected DynamoDB error", **ctx)


def ddb_call(
    operation: str,
    fn: Callable[[], T],
    *,
    table_name: str | None = None,
    key: dict[str, Any] | None = None,
    retry_policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    policy = retry_policy or RetryPolicy()
    attempts = max(1, int(policy.max_attempts))

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except Exception as e:  # noqa: BLE001
            mapped = map_error(operation=operation, table_name=table_name, key=key, exc=e)
            if not mapped.retryable or attempt >= attempts:
                if mapped is e:
                    raise
                raise mapped from e
            sleep(_backoff_delay(policy, attempt))

    raise DdbInternal(message="DynamoDB request failed", operation=operation, table_name=table_name, key=key)
