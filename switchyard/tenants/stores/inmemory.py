"""In-memory implementations of TenantStore and TemplateCatalog."""

import copy
from typing import Any

from switchyard.tenants.models import (
    ScenarioPool,
    SharedTemplate,
    TenantRecord,
    tenant_id_of,
)
from switchyard.tenants.store import TemplateCatalog, TenantStore
from switchyard.wiring.exceptions import PathConflictError, TenantNotFoundError
from switchyard.wiring.paths import MISSING, conflicting_ancestor, get_path, set_path


class InMemoryTenantStore(TenantStore):
    """In-memory TenantStore for testing and development.

    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._records: dict[str, TenantRecord] = {}

    async def get(self, tenant_id: str) -> TenantRecord | None:
        record = self._records.get(tenant_id)
        return copy.deepcopy(record) if record is not None else None

    async def save(self, record: TenantRecord) -> str:
        tenant_id = tenant_id_of(record)
        if tenant_id is None:
            raise ValueError("Tenant record has no '_id' or 'id'")
        self._records[tenant_id] = copy.deepcopy(record)
        return tenant_id

    async def set_fields_if_absent(
        self, tenant_id: str, values: dict[str, Any]
    ) -> list[str]:
        record = self._records.get(tenant_id)
        if record is None:
            raise TenantNotFoundError(tenant_id)

        written: list[str] = []
        for path, value in values.items():
            if conflicting_ancestor(record, path) is not None:
                continue
            if get_path(record, path) is MISSING:
                set_path(record, path, copy.deepcopy(value))
                written.append(path)
        return written

    async def set_fields(self, tenant_id: str, values: dict[str, Any]) -> None:
        record = self._records.get(tenant_id)
        if record is None:
            raise TenantNotFoundError(tenant_id)

        for path in values:
            ancestor = conflicting_ancestor(record, path)
            if ancestor is not None:
                raise PathConflictError(path, ancestor)
        for path, value in values.items():
            set_path(record, path, copy.deepcopy(value))


class InMemoryTemplateCatalog(TemplateCatalog):
    """In-memory TemplateCatalog for testing and development."""

    def __init__(self, templates: list[SharedTemplate] | None = None) -> None:
        self._templates: dict[str, SharedTemplate] = {}
        for template in templates or []:
            self.add(template)

    def add(self, template: SharedTemplate) -> None:
        """Register a template."""
        self._templates[template.id] = template

    async def get_template(self, template_id: str) -> SharedTemplate | None:
        return self._templates.get(template_id)

    async def get_scenario_pool(self, template_ids: list[str]) -> ScenarioPool:
        scenarios = []
        found: list[str] = []
        for template_id in template_ids:
            template = self._templates.get(template_id)
            if template is None or not template.enabled:
                continue
            found.append(template_id)
            scenarios.extend(template.scenarios)
        return ScenarioPool(
            template_ids=found,
            scenarios=scenarios,
            effective_config_version=f"catalog-{len(self._templates)}",
        )
