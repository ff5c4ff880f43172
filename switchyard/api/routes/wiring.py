"""Wiring report, seeding, remediation and diagnosis endpoints."""

from typing import Literal

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from switchyard.api.dependencies import (
    DiagnoserDep,
    ReportGeneratorDep,
    TenantStoreDep,
    WiringCatalogDep,
)
from switchyard.api.exceptions import (
    PathConflictError,
    RemediationRejectedError,
    TenantNotFoundError,
)
from switchyard.api.models.wiring import ApplyRequest, RegistryResponse, SeedResponse
from switchyard.observability.logging import get_logger
from switchyard.wiring import exceptions as wiring_errors
from switchyard.wiring.markdown import report_to_markdown
from switchyard.wiring.models.diagnosis import Diagnosis, EvidenceSnapshot
from switchyard.wiring.models.report import WiringReport
from switchyard.wiring.remediation import RemediationResult, apply_remediation
from switchyard.wiring.seeder import seed_missing_base_fields

logger = get_logger(__name__)

router = APIRouter(prefix="/wiring")


@router.get("/registry", response_model=RegistryResponse)
async def get_registry(catalog: WiringCatalogDep) -> RegistryResponse:
    """List the paths runtime code may read."""
    return RegistryResponse(
        version=catalog.version,
        registered_paths=sorted(catalog.registered_paths),
        dead_read_paths=list(catalog.dead_read_paths),
        ui_only_paths=list(catalog.ui_only_paths),
    )


@router.get(
    "/tenants/{tenant_id}/report",
    response_model=WiringReport,
    responses={200: {"content": {"text/markdown": {}}}},
)
async def get_report(
    tenant_id: str,
    generator: ReportGeneratorDep,
    category: str | None = Query(default=None, description="Category (trade) key hint"),
    environment: str | None = Query(default=None, description="Environment label"),
    format: Literal["json", "markdown"] = Query(default="json", description="Response format"),
) -> WiringReport | PlainTextResponse:
    """Generate the composite wiring report for a tenant."""
    try:
        report = await generator.generate(
            tenant_id, category_hint=category, environment=environment
        )
    except wiring_errors.TenantNotFoundError as e:
        raise TenantNotFoundError(str(e)) from e

    if format == "markdown":
        return PlainTextResponse(report_to_markdown(report), media_type="text/markdown")
    return report


@router.post("/tenants/{tenant_id}/seed", response_model=SeedResponse)
async def seed_tenant(
    tenant_id: str,
    store: TenantStoreDep,
    catalog: WiringCatalogDep,
) -> SeedResponse:
    """Fill absent required fields with their registry defaults."""
    record = await store.get(tenant_id)
    if record is None:
        raise TenantNotFoundError(f"Tenant not found: {tenant_id}")

    result = await seed_missing_base_fields(store, tenant_id, record, catalog)
    return SeedResponse(
        tenant_id=tenant_id,
        updated=result.updated,
        applied_paths=result.applied_paths,
    )


@router.post("/tenants/{tenant_id}/apply", response_model=RemediationResult)
async def apply_fix(
    tenant_id: str,
    request: ApplyRequest,
    store: TenantStoreDep,
    catalog: WiringCatalogDep,
) -> RemediationResult:
    """Apply a tier requirement's recommended or custom value."""
    try:
        return await apply_remediation(
            store, catalog, tenant_id, request.field_id, request.mode, request.value
        )
    except wiring_errors.TenantNotFoundError as e:
        raise TenantNotFoundError(str(e)) from e
    except wiring_errors.RemediationError as e:
        raise RemediationRejectedError(str(e), reason=e.reason) from e
    except wiring_errors.PathConflictError as e:
        raise PathConflictError(str(e)) from e


@router.post("/tenants/{tenant_id}/diagnose", response_model=Diagnosis)
async def diagnose_run(
    tenant_id: str,
    evidence: EvidenceSnapshot,
    diagnoser: DiagnoserDep,
    store: TenantStoreDep,
) -> Diagnosis:
    """Explain one observed run of a tenant's agent."""
    if await store.get(tenant_id) is None:
        raise TenantNotFoundError(f"Tenant not found: {tenant_id}")
    return diagnoser.diagnose(evidence, tenant_id)
