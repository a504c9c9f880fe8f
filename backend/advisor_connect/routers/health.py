from __future__ import annotations

from fastapi import APIRouter

from ..settings import settings

router = APIRouter()

SERVICE_NAME = "advisor-connect"
VERSION = "1.0.0"


@router.get("/", tags=["health"])
def health():
    return {
        "message": "Advisor Connect API",
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running",
        "environment": settings.normalized_environment,
        "storage": settings.normalized_storage_backend,
        "endpoints": [
            "GET /api/opportunities",
            "POST /api/opportunities",
            "POST /api/opportunities/{id}/apply",
            "PATCH /api/applications/{id}",
            "GET /api/company/opportunities",
            "GET /api/company/dashboard",
            "GET /api/lp/opportunities",
            "GET /api/lp/dashboard",
            "POST /api/admin/sync-applicant-counts",
        ],
    }
