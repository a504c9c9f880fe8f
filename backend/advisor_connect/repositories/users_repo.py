from __future__ import annotations

from typing import Any

from ..db.registry import USERS, get_store


def get_user_by_id(user_id: int) -> dict[str, Any] | None:
    return get_store(USERS).get(int(user_id))


def full_name(user: dict[str, Any]) -> str:
    first = str(user.get("firstName") or "").strip()
    last = str(user.get("lastName") or "").strip()
    return " ".join(p for p in (first, last) if p)


def company_display_name(user: dict[str, Any]) -> str:
    """Company name, falling back to the account holder's full name."""
    return str(user.get("companyName") or "").strip() or full_name(user)


def lp_expertise(user: dict[str, Any]) -> list[str]:
    # Profiles written by older clients use `expertiseAreas`.
    raw = user.get("expertise") or user.get("expertiseAreas") or []
    if isinstance(raw, str):
        raw = [raw]
    return [str(x).strip() for x in raw if str(x or "").strip()]
