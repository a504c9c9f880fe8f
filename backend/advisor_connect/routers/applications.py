from __future__ import annotations

from fastapi import APIRouter, Depends

from ..middleware.auth import current_actor
from ..modules.applications import application_service
from ..modules.identity.roles import Actor
from .opportunities import ApplicationStatusRequest

router = APIRouter(tags=["applications"])


@router.patch("/{applicationId}")
def update_application_status(
    applicationId: int,
    body: ApplicationStatusRequest,
    actor: Actor = Depends(current_actor),
):
    application = application_service.update_application_status(actor, applicationId, body.status)
    return {"message": "Application status updated successfully", "application": application}
