"""Wiring endpoint request and response models."""

from typing import Any

from pydantic import BaseModel, Field

from switchyard.wiring.models.enums import RemediationMode


class RegistryResponse(BaseModel):
    """Declared and dead-read paths of the loaded registry."""

    version: str
    registered_paths: list[str] = Field(default_factory=list)
    dead_read_paths: list[str] = Field(default_factory=list)
    ui_only_paths: list[str] = Field(default_factory=list)


class SeedResponse(BaseModel):
    """Paths the seed step wrote."""

    tenant_id: str
    updated: bool
    applied_paths: list[str] = Field(default_factory=list)


class ApplyRequest(BaseModel):
    """A tier remediation to apply. The storage path is never client-supplied."""

    field_id: str = Field(..., min_length=1, description="Registry field named by a tier")
    mode: RemediationMode = Field(
        default=RemediationMode.RECOMMENDED, description="Source of the applied value"
    )
    value: Any = Field(default=None, description="Value to store in custom mode")
