"""Shared-content models consumed by the wiring engine.

Tenant records themselves stay raw documents (``dict[str, Any]``): the engine
must inspect whatever shape is persisted, including legacy shapes, so it
does not coerce them into a schema.
"""

from typing import Any

from pydantic import BaseModel, Field

TenantRecord = dict[str, Any]


class ScenarioSummary(BaseModel):
    """Identity of one shared scenario; bodies never leave the catalog."""

    id: str = Field(..., description="Scenario identifier")
    name: str = Field(default="", description="Display name")
    scenario_type: str | None = Field(default=None, description="FAQ, BOOKING, EMERGENCY, ...")


class SharedTemplate(BaseModel):
    """A cross-tenant template holding scenarios."""

    id: str = Field(..., description="Template identifier")
    name: str = Field(default="Unnamed Template", description="Display name")
    category_key: str | None = Field(
        default=None, description="Trade or category the template targets"
    )
    scenarios: list[ScenarioSummary] = Field(default_factory=list, description="Scenarios")
    enabled: bool = Field(default=True, description="Whether the template is published")


class ScenarioPool(BaseModel):
    """Scenarios a tenant receives through its enabled template references."""

    template_ids: list[str] = Field(default_factory=list, description="Templates consulted")
    scenarios: list[ScenarioSummary] = Field(default_factory=list, description="Pooled scenarios")
    effective_config_version: str | None = Field(
        default=None, description="Version stamp of the pooled content"
    )


def tenant_id_of(record: TenantRecord) -> str | None:
    """Return the identifier stored on a tenant record, if any."""
    value = record.get("_id", record.get("id"))
    return str(value) if value is not None else None


def enabled_template_refs(record: TenantRecord) -> list[dict[str, Any]]:
    """Template references on a record that are not explicitly disabled."""
    settings = record.get("aiAgentSettings")
    if not isinstance(settings, dict):
        return []
    refs = settings.get("templateReferences") or []
    if not isinstance(refs, list):
        return []
    return [ref for ref in refs if isinstance(ref, dict) and ref.get("enabled") is not False]
