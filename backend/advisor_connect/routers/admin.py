from __future__ import annotations

from fastapi import APIRouter, Depends

from ..middleware.auth import current_actor
from ..modules.identity.roles import Actor
from ..modules.opportunities import opportunity_service

router = APIRouter(tags=["admin"])


@router.post("/sync-applicant-counts")
def sync_applicant_counts(actor: Actor = Depends(current_actor)):
    results = opportunity_service.resync_applicant_counts(actor)
    return {"message": "Successfully synced applicant counts for all opportunities", "results": results}
