"""Health check endpoints.

- /health/live: the process is up
- /health/ready: the database answers; reports the storage backend in use
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from clipstream.core.dependencies import SessionDep, StorageDep
from clipstream.core.settings import get_app_settings
from clipstream.features.health.schemas import LivenessResponse, ReadinessResponse

router = APIRouter(prefix="/health", tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    settings = get_app_settings()
    return LivenessResponse(service=settings.service_name, version=settings.version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "A dependency is unavailable"}},
)
async def readiness(
    response: Response, session: SessionDep, storage: StorageDep
) -> ReadinessResponse:
    checks = {"database": "healthy"}
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed", extra={"check": "database", "error": str(e)})
        checks["database"] = "unhealthy"

    ready = all(value == "healthy" for value in checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(
        ready=ready, checks=checks, storage_backend=storage.backend.backend_name
    )
