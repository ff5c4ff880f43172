"""Health check response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ComponentHealth(BaseModel):
    """Health of one dependency."""

    name: str
    status: Literal["healthy", "degraded", "unhealthy"]
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Service liveness with the loaded declaration versions."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    registry_version: str
    registered_paths: int
    consumed_paths: int
    dead_reads: int
    components: list[ComponentHealth] = Field(default_factory=list)
    timestamp: datetime
