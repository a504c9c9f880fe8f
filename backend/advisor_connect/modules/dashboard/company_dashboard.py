"""Read-only Company dashboard over the company's connections and postings."""

from __future__ import annotations

from typing import Any

from ...errors import NotFoundError
from ...repositories import connections_repo, opportunities_repo, users_repo
from ..identity.roles import Actor, Role, require_role
from ..opportunities.opportunity_fields import OpportunityStatus

MAX_LISTED = 5


def _advisor_summary(connection: dict[str, Any]) -> dict[str, Any]:
    lp = users_repo.get_user_by_id(connection["lpId"]) if isinstance(connection.get("lpId"), int) else None
    return {
        "connectionId": connection.get("id"),
        "lpId": connection.get("lpId"),
        "name": users_repo.full_name(lp) if lp else None,
        "expertise": users_repo.lp_expertise(lp) if lp else [],
        "meetingFrequency": connection.get("meetingFrequency"),
        "lastMeeting": connection.get("lastMeeting"),
    }


def build_company_dashboard(actor: Actor) -> dict[str, Any]:
    require_role(actor, Role.COMPANY, message="Access denied. Company role required.")
    user = users_repo.get_user_by_id(actor.id)
    if not user:
        raise NotFoundError(message="User not found")

    active = [c for c in connections_repo.list_connections_by_company(actor.id) if c.get("status") == "active"]
    postings = opportunities_repo.list_opportunities_by_company(actor.id)
    open_postings = [o for o in postings if o.get("status") == OpportunityStatus.OPEN.value]

    requested: list[str] = []
    seen: set[str] = set()
    for o in open_postings:
        for e in o.get("requiredExpertise") or []:
            key = str(e).strip().lower()
            if key and key not in seen:
                seen.add(key)
                requested.append(str(e).strip())

    return {
        "companyName": users_repo.company_display_name(user),
        "activeConnections": len(active),
        "connectedAdvisors": [_advisor_summary(c) for c in active[:MAX_LISTED]],
        "openOpportunities": len(open_postings),
        "totalOpportunities": len(postings),
        "requestedExpertise": requested[:MAX_LISTED],
    }
