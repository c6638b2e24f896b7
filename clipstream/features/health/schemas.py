"""Health check response schemas."""

from __future__ import annotations

from typing import Literal

from clipstream.core.schemas import CustomBase

HealthStatus = Literal["healthy", "unhealthy"]


class LivenessResponse(CustomBase):
    status: HealthStatus = "healthy"
    service: str
    version: str


class ReadinessResponse(CustomBase):
    """Dependency checks; ``ready`` is false when any check failed."""

    ready: bool
    checks: dict[str, HealthStatus]
    storage_backend: str
