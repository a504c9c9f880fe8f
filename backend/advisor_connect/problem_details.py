"""
RFC 7807 problem documents for every error the API returns.

Domain errors (`MarketplaceError`) carry their own status and title; server
errors (>= 500) always get the same generic detail so nothing internal leaks.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse

from .errors import MarketplaceError, ValidationError

PROBLEM_JSON = "application/problem+json"

GENERIC_SERVER_ERROR = "Something went wrong. Please try again later."

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
}


def _default_title(status_code: int) -> str:
    if status_code >= 500:
        return "Internal Server Error"
    return _TITLES.get(status_code, "Error")


def _request_id(request: Request) -> str | None:
    rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    return str(rid) if rid else None


def problem_payload(
    *,
    request: Request,
    status_code: int,
    title: str | None = None,
    detail: str | None = None,
    errors: list[dict[str, Any]] | None = None,
    extensions: dict[str, Any] | None = None,
) -> dict[str, Any]:
    status_code = int(status_code)
    payload: dict[str, Any] = {
        "type": "about:blank",
        "title": title or _default_title(status_code),
        "status": status_code,
        "detail": GENERIC_SERVER_ERROR if status_code >= 500 else detail,
        "instance": request.url.path,
        "requestId": _request_id(request),
        "errors": errors,
        # Extension members are namespaced so they never shadow RFC 7807 keys.
        "extensions": extensions,
    }
    return {k: v for k, v in payload.items() if v}


def problem_response(
    *,
    request: Request,
    status_code: int,
    title: str | None = None,
    detail: str | None = None,
    errors: list[dict[str, Any]] | None = None,
    extensions: dict[str, Any] | None = None,
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=int(status_code),
        content=problem_payload(
            request=request,
            status_code=status_code,
            title=title,
            detail=detail,
            errors=errors,
            extensions=extensions,
        ),
        media_type=PROBLEM_JSON,
    )


def problem_from_error(request: Request, exc: MarketplaceError) -> ORJSONResponse:
    extensions = {"field": exc.field} if isinstance(exc, ValidationError) and exc.field else None
    return problem_response(
        request=request,
        status_code=exc.status_code,
        title=exc.title,
        detail=exc.message,
        extensions=extensions,
    )
