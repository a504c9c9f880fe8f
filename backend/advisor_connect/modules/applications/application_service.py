"""
Application lifecycle: LP submission, the company review listing, and status
changes. Status transitions are permissive: any valid status may follow any
other.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ...errors import DuplicateError, InvalidStateError, NotFoundError, ValidationError
from ...observability.logging import get_logger
from ...repositories import applications_repo, opportunities_repo, users_repo
from ..discovery.opportunity_filters import newest_first
from ..identity.roles import Actor, Role, require_owner_or_admin, require_role
from ..opportunities.applicant_count_sync import sync_applicant_count
from ..opportunities.opportunity_fields import OpportunityStatus

log = get_logger("application_service")


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


APPLICATION_STATUSES = tuple(s.value for s in ApplicationStatus)


def has_applied(lp_id: int, opportunity_id: int) -> bool:
    return applications_repo.has_applied(lp_id, opportunity_id)


def apply_to_opportunity(actor: Actor, opportunity_id: int) -> dict[str, Any]:
    require_role(actor, Role.LP, message="Access denied. Only LP users can apply to opportunities.")
    user = users_repo.get_user_by_id(actor.id)
    if not user:
        raise NotFoundError(message="User not found")

    opp = opportunities_repo.get_opportunity_by_id(opportunity_id)
    if not opp:
        raise NotFoundError(message="Opportunity not found")
    if opp.get("status") != OpportunityStatus.OPEN.value:
        raise InvalidStateError(message="This opportunity is not open for applications")
    if has_applied(actor.id, opp["id"]):
        raise DuplicateError(message="You have already applied to this opportunity")

    # Snapshots: never refreshed if the user or opportunity changes later.
    application = applications_repo.create_application(
        {
            "lpId": actor.id,
            "lpName": users_repo.full_name(user),
            "lpEmail": user.get("email"),
            "opportunityId": opp["id"],
            "opportunityTitle": opp.get("title"),
            "companyId": opp.get("companyId"),
            "companyName": opp.get("companyName"),
            "status": ApplicationStatus.PENDING.value,
        }
    )
    log.info(
        "application_submitted",
        application_id=application["id"],
        opportunity_id=opp["id"],
        lp_id=actor.id,
    )

    sync_applicant_count(opp["id"])
    return application


def list_applications_for_opportunity(actor: Actor, opportunity_id: int) -> list[dict[str, Any]]:
    require_role(actor, Role.COMPANY, Role.ADMIN, message="Access denied. Company role required.")
    opp = opportunities_repo.get_opportunity_by_id(opportunity_id)
    if not opp:
        raise NotFoundError(message="Opportunity not found")
    require_owner_or_admin(
        actor,
        opp.get("companyId"),
        message="Access denied. You can only view applications for your own opportunities.",
    )
    return newest_first(applications_repo.list_applications_by_opportunity(opp["id"]))


def validate_application_status(value: Any) -> str:
    if value not in APPLICATION_STATUSES:
        raise ValidationError(
            message="Invalid status. Must be one of: " + ", ".join(APPLICATION_STATUSES),
            field="status",
        )
    return value


def update_application_status(actor: Actor, application_id: int, new_status: Any) -> dict[str, Any]:
    status = validate_application_status(new_status)

    application = applications_repo.get_application_by_id(application_id)
    if not application:
        raise NotFoundError(message="Application not found")

    opp = opportunities_repo.get_opportunity_by_id(application.get("opportunityId") or 0)
    if not opp:
        raise NotFoundError(message="Associated opportunity not found")
    require_owner_or_admin(
        actor,
        opp.get("companyId"),
        message="Access denied. You can only update applications for your own opportunities.",
    )

    updated = applications_repo.update_application(application["id"], {"status": status})
    if updated is None:
        raise NotFoundError(message="Application not found")
    log.info(
        "application_status_updated",
        application_id=updated["id"],
        opportunity_id=opp["id"],
        previous=application.get("status"),
        status=status,
        actor_id=actor.id,
    )
    return updated


def list_applications_for_lp(actor: Actor) -> list[dict[str, Any]]:
    require_role(actor, Role.LP, message="Access denied. LP role required.")
    return newest_first(applications_repo.list_applications_by_lp(actor.id))
