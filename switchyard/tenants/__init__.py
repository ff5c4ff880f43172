"""Tenant records and the shared template catalog."""

from switchyard.tenants.models import (
    ScenarioPool,
    ScenarioSummary,
    SharedTemplate,
    TenantRecord,
    enabled_template_refs,
    tenant_id_of,
)

__all__ = [
    "ScenarioPool",
    "ScenarioSummary",
    "SharedTemplate",
    "TenantRecord",
    "enabled_template_refs",
    "tenant_id_of",
]
