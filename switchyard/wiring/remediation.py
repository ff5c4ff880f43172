"""Applies a tier requirement's fix to a tenant record.

Only fields named by a tier requirement can be written, and the storage
path always comes from the registry, so a caller chooses a field and a value
but never a location.
"""

from typing import Any

from pydantic import BaseModel, Field

from switchyard.observability.logging import get_logger
from switchyard.observability.metrics import REMEDIATIONS_APPLIED
from switchyard.tenants.store import TenantStore
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.exceptions import RemediationError, TenantNotFoundError
from switchyard.wiring.models.enums import RemediationMode, TierLevel
from switchyard.wiring.models.tiers import TierRequirement
from switchyard.wiring.paths import MISSING, get_path

logger = get_logger(__name__)

TENANT_COLLECTION = "companies"

WRITABLE_PREFIXES = (
    "aiAgentSettings.",
    "transfers.",
    "dataConfig.",
    "dynamicFlow.",
)


class RemediationResult(BaseModel):
    """Outcome of applying one remediation."""

    tenant_id: str
    field_id: str
    storage_path: str
    tier: TierLevel
    mode: RemediationMode
    previous_value: Any = Field(default=None, description="Stored value before the write")
    applied_value: Any = Field(default=None, description="Value now stored at the path")
    changed: bool = Field(default=False, description="Whether the stored value differed")


def find_requirement(
    catalog: WiringCatalog, field_id: str
) -> tuple[TierLevel, TierRequirement] | None:
    """The first tier requirement declared for a field, with its tier."""
    for tier in catalog.tiers:
        for requirement in tier.requirements:
            if requirement.field_id == field_id:
                return tier.id, requirement
    return None


def _value_for(
    requirement: TierRequirement, mode: RemediationMode, value: Any
) -> Any:
    field_id = requirement.field_id
    if mode == RemediationMode.CUSTOM:
        if value is None:
            raise RemediationError(
                field_id, "MISSING_VALUE", f"Custom remediation of {field_id} needs a value"
            )
        return value

    if requirement.requires_user_input:
        raise RemediationError(
            field_id,
            "REQUIRES_USER_INPUT",
            f"{field_id} needs tenant-specific input; apply it in custom mode",
        )
    if requirement.recommended_value is None:
        raise RemediationError(
            field_id, "NO_RECOMMENDED_VALUE", f"{field_id} has no recommended value"
        )
    return requirement.recommended_value


async def apply_remediation(
    store: TenantStore,
    catalog: WiringCatalog,
    tenant_id: str,
    field_id: str,
    mode: RemediationMode | str = RemediationMode.RECOMMENDED,
    value: Any = None,
) -> RemediationResult:
    """Write a tier requirement's recommended or operator-supplied value.

    Args:
        store: Tenant store to write through
        catalog: Declarations providing tiers and storage paths
        tenant_id: Tenant to update
        field_id: Registry field named by a tier requirement
        mode: ``recommended`` applies the declared value; ``custom`` applies ``value``
        value: Value for custom mode

    Returns:
        The previous and applied values

    Raises:
        ValueError: If ``mode`` is not a known remediation mode
        RemediationError: If the field cannot be remediated this way
        TenantNotFoundError: If the tenant does not exist
        PathConflictError: If the storage path runs through a non-object value
    """
    mode = RemediationMode(mode)

    found = find_requirement(catalog, field_id)
    if found is None:
        raise RemediationError(
            field_id, "FIELD_NOT_IN_TIERS", f"{field_id} is not a tier requirement"
        )
    tier, requirement = found

    field = catalog.field(field_id)
    storage_path = field.storage_path if field is not None else None
    if field is None or storage_path is None:
        raise RemediationError(
            field_id, "NO_STORAGE_PATH", f"{field_id} has no stored location to write"
        )
    if field.storage.collection != TENANT_COLLECTION or not storage_path.startswith(
        WRITABLE_PREFIXES
    ):
        raise RemediationError(
            field_id,
            "PATH_OUT_OF_SCOPE",
            f"{storage_path} is not a tenant-scoped settings path",
        )

    new_value = _value_for(requirement, mode, value)
    if field.allowed_values is not None and new_value not in field.allowed_values:
        raise RemediationError(
            field_id,
            "VALUE_NOT_ALLOWED",
            f"{new_value!r} is not one of {list(field.allowed_values)}",
        )

    record = await store.get(tenant_id)
    if record is None:
        raise TenantNotFoundError(tenant_id)

    previous = get_path(record, storage_path)
    previous_value = None if previous is MISSING else previous
    changed = previous is MISSING or previous != new_value
    if changed:
        await store.set_fields(tenant_id, {storage_path: new_value})
        REMEDIATIONS_APPLIED.labels(tier=tier.value, mode=mode.value).inc()

    logger.info(
        "remediation_applied",
        tenant_id=tenant_id,
        field_id=field_id,
        storage_path=storage_path,
        tier=tier.value,
        mode=mode.value,
        changed=changed,
    )
    return RemediationResult(
        tenant_id=tenant_id,
        field_id=field_id,
        storage_path=storage_path,
        tier=tier,
        mode=mode,
        previous_value=previous_value,
        applied_value=new_value,
        changed=changed,
    )
