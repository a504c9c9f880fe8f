from __future__ import annotations

from fastapi import APIRouter, Depends

from ..middleware.auth import current_actor
from ..modules.applications import application_service
from ..modules.dashboard.lp_dashboard import build_lp_dashboard
from ..modules.identity.roles import Actor
from ..modules.opportunities import opportunity_service

router = APIRouter(tags=["lp"])


@router.get("/opportunities")
def scored_opportunities(actor: Actor = Depends(current_actor)):
    return opportunity_service.list_scored_for_lp(actor)


@router.get("/applications")
def my_applications(actor: Actor = Depends(current_actor)):
    return application_service.list_applications_for_lp(actor)


@router.get("/dashboard")
def dashboard(actor: Actor = Depends(current_actor)):
    return {"message": "Welcome to LP Advisory Portal!", "data": build_lp_dashboard(actor)}
