from __future__ import annotations

from contextvars import ContextVar

# Set per request by RequestContextMiddleware / AuthMiddleware; read by logging.
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
actor_id_var: ContextVar[int | None] = ContextVar("actor_id", default=None)


def get_request_id() -> str | None:
    return request_id_var.get()


def get_actor_id() -> int | None:
    return actor_id_var.get()
