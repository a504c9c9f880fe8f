"""
Read-only LP dashboard aggregation over connections, opportunities and the
LP's own applications.
"""

from __future__ import annotations

from typing import Any

from ...errors import NotFoundError
from ...repositories import applications_repo, connections_repo, opportunities_repo, users_repo
from ..applications.application_service import APPLICATION_STATUSES
from ..identity.roles import Actor, Role, require_role
from ..opportunities.opportunity_fields import OpportunityStatus
from ..opportunities.opportunity_service import scored_open_opportunities

TOP_MATCHES = 3


def build_lp_dashboard(actor: Actor) -> dict[str, Any]:
    require_role(actor, Role.LP, message="Access denied. LP role required.")
    user = users_repo.get_user_by_id(actor.id)
    if not user:
        raise NotFoundError(message="User not found")

    connections = connections_repo.list_connections_by_lp(actor.id)
    applications = applications_repo.list_applications_by_lp(actor.id)
    by_status = {s: 0 for s in APPLICATION_STATUSES}
    for a in applications:
        s = a.get("status")
        if s in by_status:
            by_status[s] += 1

    open_count = sum(
        1 for o in opportunities_repo.list_opportunities() if o.get("status") == OpportunityStatus.OPEN.value
    )
    top = [
        {
            "opportunityId": o["id"],
            "title": o.get("title"),
            "companyName": o.get("companyName"),
            "matchScore": o["matchScore"],
        }
        for o in scored_open_opportunities(user)[:TOP_MATCHES]
    ]

    return {
        "expertise": users_repo.lp_expertise(user),
        "activeConnections": sum(1 for c in connections if c.get("status") == "active"),
        "completedConnections": sum(1 for c in connections if c.get("status") == "completed"),
        "companiesAdvised": len({c.get("companyId") for c in connections if c.get("companyId") is not None}),
        "openOpportunities": open_count,
        "applications": {"total": len(applications), "byStatus": by_status},
        "recommendedOpportunities": top,
    }
