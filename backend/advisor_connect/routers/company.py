from __future__ import annotations

from fastapi import APIRouter, Depends

from ..middleware.auth import current_actor
from ..modules.dashboard.company_dashboard import build_company_dashboard
from ..modules.identity.roles import Actor
from ..modules.opportunities import opportunity_service

router = APIRouter(tags=["company"])


@router.get("/opportunities")
def my_opportunities(actor: Actor = Depends(current_actor)):
    return opportunity_service.list_company_opportunities(actor)


@router.get("/dashboard")
def dashboard(actor: Actor = Depends(current_actor)):
    return {"message": "Welcome to Startup Advisory Hub!", "data": build_company_dashboard(actor)}
