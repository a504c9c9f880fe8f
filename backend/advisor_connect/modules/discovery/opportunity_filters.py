"""
Discovery filters over a snapshot of opportunities.

Pure: the same snapshot, filters and actor always give the same ordered list.
Count reconciliation and `hasApplied` enrichment happen in the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from ..identity.roles import Actor, Role

_ANY = {"", "all"}


@dataclass(frozen=True, slots=True)
class OpportunityFilters:
    status: str | None = "open"
    expertise: str | None = None
    time_commitment: str | None = None
    search: str | None = None


def _active(value: str | None) -> str | None:
    s = str(value or "").strip()
    return None if s.lower() in _ANY else s


def _contains(haystack: Any, needle: str) -> bool:
    return needle.lower() in str(haystack or "").lower()


def _created_at(record: dict[str, Any]) -> datetime:
    raw = str(record.get("createdAt") or "").strip()
    if raw:
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            dt = None
        if dt is not None:
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return datetime.min.replace(tzinfo=timezone.utc)


def newest_first(records: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """createdAt descending; id descending breaks ties."""
    return sorted(records, key=lambda r: (_created_at(r), int(r.get("id") or 0)), reverse=True)


def filter_opportunities(
    opportunities: Iterable[dict[str, Any]],
    filters: OpportunityFilters,
    actor: Actor,
) -> list[dict[str, Any]]:
    items = list(opportunities)

    if actor.role is Role.COMPANY:
        items = [o for o in items if o.get("companyId") != actor.id]

    status = _active(filters.status)
    if status:
        items = [o for o in items if o.get("status") == status]

    expertise = _active(filters.expertise)
    if expertise:
        items = [o for o in items if any(_contains(e, expertise) for e in o.get("requiredExpertise") or [])]

    commitment = _active(filters.time_commitment)
    if commitment:
        items = [o for o in items if _contains(o.get("timeCommitment"), commitment)]

    search = str(filters.search or "").strip()
    if search:
        items = [
            o
            for o in items
            if _contains(o.get("title"), search)
            or _contains(o.get("description"), search)
            or _contains(o.get("companyName"), search)
        ]

    return newest_first(items)
