from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ...errors import AuthorizationError


class Role(str, Enum):
    ADMIN = "Admin"
    LP = "LP"
    COMPANY = "Company"


@dataclass(frozen=True, slots=True)
class Actor:
    """Verified caller identity handed over by the auth layer."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def normalize_role(value: Any) -> Role | None:
    """
    Map a role claim onto the closed Role set.
    Accepts common spelling variants; anything else is None.
    """
    s = str(value or "").strip()
    if not s:
        return None
    low = s.lower().replace("_", "").replace("-", "").replace(" ", "")
    if low in ("admin", "administrator"):
        return Role.ADMIN
    if low in ("lp", "limitedpartner", "advisor"):
        return Role.LP
    if low in ("company", "startup"):
        return Role.COMPANY
    return None


def require_role(actor: Actor, *allowed: Role, message: str | None = None) -> None:
    if actor.role in allowed:
        return
    names = ", ".join(r.value for r in allowed)
    raise AuthorizationError(message=message or f"Access denied. Required roles: {names}")


def can_manage(actor: Actor, owner_company_id: Any) -> bool:
    """
    Ownership rule shared by opportunities and their applications:
    the owning Company or any Admin.
    """
    if actor.role is Role.ADMIN:
        return True
    if actor.role is Role.COMPANY:
        return _same_id(actor.id, owner_company_id)
    if actor.role is Role.LP:
        return False
    raise AssertionError(f"unhandled role: {actor.role!r}")


def require_owner_or_admin(actor: Actor, owner_company_id: Any, *, message: str) -> None:
    if not can_manage(actor, owner_company_id):
        raise AuthorizationError(message=message)


def _same_id(a: Any, b: Any) -> bool:
    try:
        return int(a) == int(b)
    except (TypeError, ValueError):
        return False
