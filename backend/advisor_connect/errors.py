from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(slots=True, eq=False)
class MarketplaceError(Exception):
    """Base error for the opportunity/application core.

    Raised at the lifecycle-manager boundary and rendered by a FastAPI
    exception handler into an RFC7807 problem-details response.
    """

    message: str

    status_code: ClassVar[int] = 500
    title: ClassVar[str] = "Internal Server Error"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True, eq=False)
class ValidationError(MarketplaceError):
    field: str | None = None

    status_code: ClassVar[int] = 400
    title: ClassVar[str] = "Bad Request"


@dataclass(slots=True, eq=False)
class AuthorizationError(MarketplaceError):
    status_code: ClassVar[int] = 403
    title: ClassVar[str] = "Forbidden"


@dataclass(slots=True, eq=False)
class NotFoundError(MarketplaceError):
    status_code: ClassVar[int] = 404
    title: ClassVar[str] = "Not Found"


@dataclass(slots=True, eq=False)
class DuplicateError(MarketplaceError):
    status_code: ClassVar[int] = 400
    title: ClassVar[str] = "Duplicate"


@dataclass(slots=True, eq=False)
class InvalidStateError(MarketplaceError):
    status_code: ClassVar[int] = 400
    title: ClassVar[str] = "Invalid State"


@dataclass(slots=True, eq=False)
class StorageError(MarketplaceError):
    """Persistence failure. Never rendered with internal detail."""

    operation: str | None = None
    collection: str | None = None
    cause: Exception | None = None

    status_code: ClassVar[int] = 500
    title: ClassVar[str] = "Storage Error"
