from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, ConfigDict

from ..middleware.auth import current_actor
from ..modules.applications import application_service
from ..modules.discovery.opportunity_filters import OpportunityFilters
from ..modules.identity.roles import Actor
from ..modules.opportunities import opportunity_service

router = APIRouter(tags=["opportunities"])


class OpportunityRequest(BaseModel):
    # Field rules live in opportunity_fields so every path reports the same messages.
    model_config = ConfigDict(extra="ignore")

    title: Any = None
    description: Any = None
    requiredExpertise: Any = None
    timeCommitment: Any = None
    compensation: Any = None


class ApplicationStatusRequest(BaseModel):
    status: Any = None


@router.post("", status_code=201)
def create_opportunity(body: OpportunityRequest, actor: Actor = Depends(current_actor)):
    opp = opportunity_service.create_opportunity(actor, body.model_dump())
    return {"message": "Opportunity created successfully", "opportunity": opp}


@router.get("")
def list_opportunities(
    status: str | None = Query(default="open"),
    expertise: str | None = None,
    timeCommitment: str | None = None,
    search: str | None = None,
    actor: Actor = Depends(current_actor),
):
    filters = OpportunityFilters(
        status=status,
        expertise=expertise,
        time_commitment=timeCommitment,
        search=search,
    )
    return opportunity_service.list_opportunities_for(actor, filters)


# Declared before /{opportunityId} routes so "applications" is never parsed as an id.
@router.patch("/applications/{applicationId}")
def update_application_status_alias(
    applicationId: int,
    body: ApplicationStatusRequest,
    actor: Actor = Depends(current_actor),
):
    application = application_service.update_application_status(actor, applicationId, body.status)
    return {"message": "Application status updated successfully", "application": application}


@router.get("/{opportunityId}")
def get_opportunity(opportunityId: int, actor: Actor = Depends(current_actor)):
    return opportunity_service.get_opportunity(opportunityId)


@router.post("/{opportunityId}/view")
def track_view(opportunityId: int, actor: Actor = Depends(current_actor)):
    view_count = opportunity_service.track_view(opportunityId)
    return {"message": "View tracked successfully", "viewCount": view_count, "opportunityId": opportunityId}


@router.put("/{opportunityId}")
def update_opportunity(opportunityId: int, body: OpportunityRequest, actor: Actor = Depends(current_actor)):
    opp = opportunity_service.update_opportunity(actor, opportunityId, body.model_dump())
    return {"message": "Opportunity updated successfully", "opportunity": opp}


@router.patch("/{opportunityId}")
def patch_opportunity(
    opportunityId: int,
    body: dict[str, Any] = Body(default_factory=dict),
    actor: Actor = Depends(current_actor),
):
    opp = opportunity_service.patch_opportunity(actor, opportunityId, body)
    return {"message": "Opportunity updated successfully", "opportunity": opp}


@router.delete("/{opportunityId}")
def delete_opportunity(opportunityId: int, actor: Actor = Depends(current_actor)):
    opportunity_service.delete_opportunity(actor, opportunityId)
    return {"message": "Opportunity deleted successfully"}


@router.post("/{opportunityId}/apply", status_code=201)
def apply(opportunityId: int, actor: Actor = Depends(current_actor)):
    application = application_service.apply_to_opportunity(actor, opportunityId)
    return {"message": "Application submitted successfully", "applicationId": application["id"]}


@router.get("/{opportunityId}/applications")
def list_applications(opportunityId: int, actor: Actor = Depends(current_actor)):
    return application_service.list_applications_for_opportunity(actor, opportunityId)
