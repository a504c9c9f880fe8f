from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..auth.tokens import TokenAuthError, verify_bearer_token
from ..modules.identity.roles import Actor
from ..observability.context import actor_id_var
from ..observability.logging import get_logger
from ..problem_details import problem_response


async def require_auth(request: Request):
    path = request.url.path

    # Let CORS preflight through without auth.
    if request.method.upper() == "OPTIONS":
        return

    # Only /api/* needs a bearer token; "GET /" health is public.
    if not path.startswith("/api/"):
        return

    auth = request.headers.get("authorization")
    if not auth:
        raise HTTPException(status_code=401, detail="Missing or invalid token")

    parts = str(auth).split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing or invalid token")

    try:
        actor = verify_bearer_token(parts[1].strip())
    except TokenAuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    request.state.actor = actor


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Auth enforcement as ASGI middleware.

    Must be added *before* CORSMiddleware so CORS wraps auth failures too.
    """

    async def dispatch(self, request: Request, call_next):
        log = get_logger("auth_middleware")
        try:
            await require_auth(request)
        except HTTPException as exc:
            if exc.status_code >= 500:
                log.error("auth_middleware_error", status_code=exc.status_code, path=request.url.path)
            else:
                log.info("auth_middleware_denied", status_code=exc.status_code, path=request.url.path)
            return problem_response(
                request=request,
                status_code=exc.status_code,
                title="Unauthorized" if exc.status_code == 401 else None,
                detail=str(exc.detail) if isinstance(exc.detail, str) else None,
            )
        actor = getattr(request.state, "actor", None)
        token = actor_id_var.set(actor.id if isinstance(actor, Actor) else None)
        try:
            return await call_next(request)
        finally:
            actor_id_var.reset(token)


def current_actor(request: Request) -> Actor:
    """FastAPI dependency returning the verified caller."""
    actor = getattr(request.state, "actor", None)
    if not isinstance(actor, Actor):
        raise HTTPException(status_code=401, detail="Authentication required")
    return actor
