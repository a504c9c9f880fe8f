from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..observability.logging import get_logger


def _actor_id(request: Request) -> int | None:
    actor = getattr(request.state, "actor", None)
    return getattr(actor, "id", None)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    One structured `request` event per call. 5xx responses log at error,
    4xx at warning, everything else at info.
    """

    def __init__(self, app, *, exclude_paths: set[str] | None = None):
        super().__init__(app)
        self._exclude = frozenset(exclude_paths or ())
        self._log = get_logger("access")

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self._exclude:
            return await call_next(request)

        start = time.perf_counter()
        fields = {
            "http_method": request.method.upper(),
            "path": request.url.path,
            "query": request.url.query or None,
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception:
            self._log.exception(
                "request_error",
                duration_ms=_elapsed_ms(start),
                actor_id=_actor_id(request),
                **fields,
            )
            raise

        status = int(response.status_code)
        emit = self._log.error if status >= 500 else self._log.warning if status >= 400 else self._log.info
        emit(
            "request",
            status_code=status,
            duration_ms=_elapsed_ms(start),
            actor_id=_actor_id(request),
            **fields,
        )
        return response
