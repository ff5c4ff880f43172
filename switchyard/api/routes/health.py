"""Health check and metrics endpoints."""

from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from switchyard import __version__
from switchyard.api.dependencies import (
    TemplateCatalogDep,
    TenantStoreDep,
    TraceEmitterDep,
    WiringCatalogDep,
)
from switchyard.api.models.health import ComponentHealth, HealthResponse
from switchyard.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _component(store: object, name: str) -> ComponentHealth:
    if store is not None:
        return ComponentHealth(name=name, status="healthy")
    return ComponentHealth(name=name, status="unhealthy", message="Store not initialized")


@router.get("/health", response_model=HealthResponse)
async def health_check(
    catalog: WiringCatalogDep,
    tenant_store: TenantStoreDep,
    template_catalog: TemplateCatalogDep,
    emitter: TraceEmitterDep,
) -> HealthResponse:
    """Check service health and report the loaded declarations.

    The trace pipeline is reported degraded once it has dropped events;
    dropping never affects config reads.
    """
    logger.debug("health_check_request")

    trace = ComponentHealth(name="trace_emitter", status="healthy")
    if emitter.dropped > 0:
        trace = ComponentHealth(
            name="trace_emitter",
            status="degraded",
            message=f"{emitter.dropped} events dropped",
        )
    components = [
        _component(tenant_store, "tenant_store"),
        _component(template_catalog, "template_catalog"),
        trace,
    ]

    overall_status: Literal["healthy", "degraded", "unhealthy"]
    if any(c.status == "unhealthy" for c in components):
        overall_status = "unhealthy"
    elif any(c.status == "degraded" for c in components):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    response = HealthResponse(
        status=overall_status,
        version=__version__,
        registry_version=catalog.version,
        registered_paths=len(catalog.registered_paths),
        consumed_paths=len(catalog.consumed_paths),
        dead_reads=len(catalog.dead_read_paths),
        components=components,
        timestamp=datetime.now(UTC),
    )

    logger.debug("health_check_completed", status=overall_status)

    return response


@router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    logger.debug("metrics_request")

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
