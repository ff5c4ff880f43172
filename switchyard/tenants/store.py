"""Tenant record store and shared template catalog interfaces."""

from abc import ABC, abstractmethod
from typing import Any

from switchyard.tenants.models import ScenarioPool, SharedTemplate, TenantRecord


class TenantStore(ABC):
    """Abstract interface for persisted tenant records.

    Records are returned as independent copies; mutating a returned record
    never changes the stored one.
    """

    @abstractmethod
    async def get(self, tenant_id: str) -> TenantRecord | None:
        """Get a tenant record by ID."""
        pass

    @abstractmethod
    async def save(self, record: TenantRecord) -> str:
        """Create or replace a tenant record, returning its ID."""
        pass

    @abstractmethod
    async def set_fields_if_absent(
        self, tenant_id: str, values: dict[str, Any]
    ) -> list[str]:
        """Set dotted-path fields only where no value exists yet.

        A path is skipped when one of its ancestors holds a non-object
        value; that value is never replaced.

        Returns:
            The paths that were actually written
        """
        pass

    @abstractmethod
    async def set_fields(self, tenant_id: str, values: dict[str, Any]) -> None:
        """Set dotted-path fields, replacing any stored values.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            PathConflictError: If a path runs through a non-object value;
                nothing is written in that case
        """
        pass


class TemplateCatalog(ABC):
    """Abstract interface for the shared-content catalog."""

    @abstractmethod
    async def get_template(self, template_id: str) -> SharedTemplate | None:
        """Get a shared template by ID."""
        pass

    @abstractmethod
    async def get_scenario_pool(self, template_ids: list[str]) -> ScenarioPool:
        """Pool the scenarios of the given templates.

        Raises:
            DerivationError: If the catalog cannot be read
        """
        pass
