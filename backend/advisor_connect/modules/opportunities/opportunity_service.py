"""
Opportunity lifecycle: create, full update, partial patch, delete, views, and
the role-aware listings (browse, company manage view, LP scored view).

Every function takes the verified `Actor` first and raises `MarketplaceError`
subclasses; routers only translate HTTP to these calls.
"""

from __future__ import annotations

from typing import Any

from ...errors import NotFoundError
from ...observability.logging import get_logger
from ...repositories import applications_repo, opportunities_repo, users_repo
from ..discovery.match_scoring import rank_by_match
from ..discovery.opportunity_filters import OpportunityFilters, filter_opportunities, newest_first
from ..identity.roles import Actor, Role, require_owner_or_admin, require_role
from .applicant_count_sync import reconcile_all_applicant_counts, reconcile_applicant_counts
from .opportunity_fields import OpportunityStatus, validate_opportunity_fields, validate_opportunity_patch

log = get_logger("opportunity_service")

COMPANY_ROLE_REQUIRED = "Access denied. Company role required."
LP_ROLE_REQUIRED = "Access denied. LP role required."
ADMIN_ROLE_REQUIRED = "Access denied. Admin role required."


def _load_user(actor: Actor) -> dict[str, Any]:
    user = users_repo.get_user_by_id(actor.id)
    if not user:
        raise NotFoundError(message="User not found")
    return user


def get_opportunity(opportunity_id: int) -> dict[str, Any]:
    opp = opportunities_repo.get_opportunity_by_id(opportunity_id)
    if not opp:
        raise NotFoundError(message="Opportunity not found")
    return opp


def _managed_opportunity(actor: Actor, opportunity_id: int, *, verb: str) -> dict[str, Any]:
    opp = get_opportunity(opportunity_id)
    require_owner_or_admin(
        actor,
        opp.get("companyId"),
        message=f"Access denied. You can only {verb} your own opportunities.",
    )
    return opp


def _persisted(updated: dict[str, Any] | None) -> dict[str, Any]:
    # update() returns None only when the record vanished mid-request.
    if updated is None:
        raise NotFoundError(message="Opportunity not found")
    return updated


def create_opportunity(actor: Actor, fields: dict[str, Any] | None) -> dict[str, Any]:
    require_role(actor, Role.COMPANY, message=COMPANY_ROLE_REQUIRED)
    user = _load_user(actor)
    clean = validate_opportunity_fields(fields)

    opp = opportunities_repo.create_opportunity(
        {
            **clean,
            "companyId": actor.id,
            "companyName": users_repo.company_display_name(user),
            "status": OpportunityStatus.OPEN.value,
            "viewCount": 0,
            "applicantCount": 0,
        }
    )
    log.info("opportunity_created", opportunity_id=opp["id"], company_id=actor.id)
    return opp


def update_opportunity(actor: Actor, opportunity_id: int, fields: dict[str, Any] | None) -> dict[str, Any]:
    """Full replace of the editable fields; status, owner and counters are untouched."""
    _managed_opportunity(actor, opportunity_id, verb="update")
    clean = validate_opportunity_fields(fields)
    updated = _persisted(opportunities_repo.update_opportunity(opportunity_id, clean))
    log.info("opportunity_updated", opportunity_id=updated["id"], actor_id=actor.id)
    return updated


def patch_opportunity(actor: Actor, opportunity_id: int, partial: dict[str, Any] | None) -> dict[str, Any]:
    opp = _managed_opportunity(actor, opportunity_id, verb="update")
    changes = validate_opportunity_patch(partial)
    if not changes:
        return opp

    updated = _persisted(opportunities_repo.update_opportunity(opportunity_id, changes))
    log.info(
        "opportunity_patched",
        opportunity_id=updated["id"],
        actor_id=actor.id,
        fields=sorted(changes),
        status=updated.get("status"),
    )
    return updated


def delete_opportunity(actor: Actor, opportunity_id: int) -> None:
    _managed_opportunity(actor, opportunity_id, verb="delete")
    if not opportunities_repo.delete_opportunity(opportunity_id):
        raise NotFoundError(message="Opportunity not found")
    # Applications are left in place; they keep their snapshot fields.
    log.info("opportunity_deleted", opportunity_id=int(opportunity_id), actor_id=actor.id)


def track_view(opportunity_id: int) -> int:
    """Count one more view. No dedup by viewer."""
    opp = get_opportunity(opportunity_id)
    next_count = int(opp.get("viewCount") or 0) + 1
    updated = _persisted(opportunities_repo.update_opportunity(opportunity_id, {"viewCount": next_count}))
    return int(updated.get("viewCount") or 0)


def _applied_ids(lp_id: int) -> set[int]:
    return {a["opportunityId"] for a in applications_repo.list_applications_by_lp(lp_id) if "opportunityId" in a}


def _with_has_applied(actor: Actor, opportunities: list[dict[str, Any]]) -> list[dict[str, Any]]:
    applied = _applied_ids(actor.id)
    return [{**o, "hasApplied": o.get("id") in applied} for o in opportunities]


def list_opportunities_for(actor: Actor, filters: OpportunityFilters | None = None) -> list[dict[str, Any]]:
    """Browse view: filter, newest first, reconcile counts, then LP enrichment."""
    result = filter_opportunities(opportunities_repo.list_opportunities(), filters or OpportunityFilters(), actor)
    result = reconcile_applicant_counts(result)
    if actor.role is Role.LP:
        result = _with_has_applied(actor, result)
    return result


def list_company_opportunities(actor: Actor) -> list[dict[str, Any]]:
    """Manage view: the company's own postings, any status."""
    require_role(actor, Role.COMPANY, message=COMPANY_ROLE_REQUIRED)
    own = newest_first(opportunities_repo.list_opportunities_by_company(actor.id))
    return reconcile_applicant_counts(own)


def scored_open_opportunities(lp_user: dict[str, Any]) -> list[dict[str, Any]]:
    open_opps = [o for o in opportunities_repo.list_opportunities() if o.get("status") == OpportunityStatus.OPEN.value]
    return rank_by_match(open_opps, users_repo.lp_expertise(lp_user))


def list_scored_for_lp(actor: Actor) -> list[dict[str, Any]]:
    """LP retrieval path: open opportunities ranked by expertise overlap."""
    require_role(actor, Role.LP, message=LP_ROLE_REQUIRED)
    user = _load_user(actor)
    ranked = reconcile_applicant_counts(scored_open_opportunities(user))
    return _with_has_applied(actor, ranked)



def resync_applicant_counts(actor: Actor) -> list[dict[str, Any]]:
    """Admin maintenance: recount applicants for every opportunity."""
    require_role(actor, Role.ADMIN, message=ADMIN_ROLE_REQUIRED)
    return reconcile_all_applicant_counts()
