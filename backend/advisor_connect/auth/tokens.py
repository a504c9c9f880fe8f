from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from ..modules.identity.roles import Actor, normalize_role
from ..settings import settings


class TokenAuthError(Exception):
    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


def _claim_user_id(claims: dict[str, Any]) -> int:
    raw = claims.get("id")
    if raw is None:
        raw = claims.get("sub")
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise TokenAuthError("Token is missing a valid user id") from None


def verify_bearer_token(token: str) -> Actor:
    """
    Verify a bearer token issued by the upstream auth service and return the
    caller identity. Signature and expiry are the only checks made here.
    """
    if not token:
        raise TokenAuthError("Missing or invalid token")
    if not settings.jwt_secret:
        raise TokenAuthError("JWT_SECRET is not set", status_code=500)

    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        raise TokenAuthError("Invalid or expired token") from None

    role = normalize_role(claims.get("role"))
    if role is None:
        raise TokenAuthError("Token carries an unknown role")

    return Actor(id=_claim_user_id(claims), role=role)
