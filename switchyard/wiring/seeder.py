"""Seeds required base fields that a tenant record has never stored.

Seeding only fills absent paths with registry defaults, so repeating it, or
running it concurrently for the same tenant, never changes a stored value.
"""

from typing import Any

from pydantic import BaseModel, Field

from switchyard.observability.logging import get_logger
from switchyard.tenants.store import TenantStore
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.models.registry import FieldNode
from switchyard.wiring.paths import MISSING, conflicting_ancestor, get_path, is_empty
from switchyard.wiring.resolver import PathResolver

logger = get_logger(__name__)


class SeedResult(BaseModel):
    """Outcome of one seeding pass."""

    updated: bool = Field(default=False, description="Whether anything was written")
    applied_paths: list[str] = Field(
        default_factory=list, description="Storage paths that received a default"
    )


def seedable_fields(catalog: WiringCatalog) -> list[FieldNode]:
    """Required stored fields whose registry default is a usable value."""
    return [
        field
        for field in catalog.registry.fields()
        if field.required and field.storage_path and not is_empty(field.default_value)
    ]


def plan_seed(catalog: WiringCatalog, record: dict[str, Any]) -> dict[str, Any]:
    """Storage path to default value for every seedable field the record lacks.

    A field answered by a legacy bridge is left alone; writing the canonical
    path would shadow the legacy value. So is a field whose storage path runs
    through a present non-object value, such as a legacy string or list.
    """
    resolver = PathResolver(catalog)
    values: dict[str, Any] = {}
    for field in seedable_fields(catalog):
        storage_path = field.storage_path
        if get_path(record, storage_path) is not MISSING:
            continue
        ancestor = conflicting_ancestor(record, storage_path)
        if ancestor is not None:
            logger.warning(
                "seed_path_conflict",
                field_id=field.id,
                storage_path=storage_path,
                ancestor=ancestor,
            )
            continue
        if not resolver.resolve(field.id, record, include_default=False).is_absent:
            continue
        values[storage_path] = field.default_value
    return values


async def seed_missing_base_fields(
    store: TenantStore,
    tenant_id: str,
    record: dict[str, Any],
    catalog: WiringCatalog,
) -> SeedResult:
    """Write registry defaults for required fields the tenant has never stored.

    Args:
        store: Tenant store to write through
        tenant_id: Tenant to seed
        record: Current copy of the tenant record, used to plan the writes
        catalog: Declarations providing required fields and defaults

    Returns:
        The paths actually written by the store
    """
    planned = plan_seed(catalog, record)
    if not planned:
        return SeedResult()

    applied = await store.set_fields_if_absent(tenant_id, planned)
    if applied:
        logger.info("tenant_seeded", tenant_id=tenant_id, applied_paths=applied)
    return SeedResult(updated=bool(applied), applied_paths=applied)
