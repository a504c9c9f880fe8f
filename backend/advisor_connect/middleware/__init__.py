from __future__ import annotations

from .auth import AuthMiddleware, current_actor
from .request_context import RequestContextMiddleware

__all__ = ["AuthMiddleware", "RequestContextMiddleware", "current_actor"]
