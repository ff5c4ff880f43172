"""Dependency injection for API routes.

Provides FastAPI dependencies for settings, stores, the declaration catalog
and the trace pipeline. Every provider can be replaced through
``app.dependency_overrides`` in tests; ``reset_dependencies`` drops the
cached instances.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from switchyard.config.loader import load_config
from switchyard.config.settings import Settings, set_toml_config
from switchyard.observability.logging import get_logger
from switchyard.tenants.store import TemplateCatalog, TenantStore
from switchyard.tenants.stores.inmemory import InMemoryTemplateCatalog, InMemoryTenantStore
from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.store import TraceSink
from switchyard.trace.stores.inmemory import InMemoryTraceSink
from switchyard.wiring.catalog import WiringCatalog, get_catalog
from switchyard.wiring.diagnoser import EvidenceDiagnoser
from switchyard.wiring.reader import set_default_emitter
from switchyard.wiring.report import WiringReportGenerator

logger = get_logger(__name__)

# Instances created once and reused
_tenant_store: TenantStore | None = None
_template_catalog: TemplateCatalog | None = None
_trace_sink: TraceSink | None = None
_trace_emitter: TraceEmitter | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables.
    Cached to avoid reloading on every request.
    """
    try:
        toml_config = load_config()
        set_toml_config(toml_config)
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


def get_wiring_catalog() -> WiringCatalog:
    """Get the declaration catalog built at import."""
    return get_catalog()


def get_tenant_store() -> TenantStore:
    """Get the TenantStore instance.

    Only the in-memory store ships; deployments provide their own backend
    through a dependency override.
    """
    global _tenant_store
    if _tenant_store is None:
        _tenant_store = InMemoryTenantStore()
        logger.info("tenant_store_initialized", store_type="inmemory")
    return _tenant_store


def get_template_catalog() -> TemplateCatalog:
    """Get the shared template catalog."""
    global _template_catalog
    if _template_catalog is None:
        _template_catalog = InMemoryTemplateCatalog()
        logger.info("template_catalog_initialized", store_type="inmemory")
    return _template_catalog


def get_trace_sink() -> TraceSink:
    """Get the TraceSink receiving config read events."""
    global _trace_sink
    if _trace_sink is None:
        _trace_sink = InMemoryTraceSink()
        logger.info("trace_sink_initialized", store_type="inmemory")
    return _trace_sink


def get_trace_emitter(
    settings: Annotated[Settings, Depends(get_settings)],
    sink: Annotated[TraceSink, Depends(get_trace_sink)],
) -> TraceEmitter:
    """Get the process trace emitter and register it as the readers' default."""
    global _trace_emitter
    if _trace_emitter is None:
        trace = settings.wiring.trace
        _trace_emitter = TraceEmitter(
            sink, max_queue_size=trace.max_queue_size, enabled=trace.enabled
        )
        set_default_emitter(_trace_emitter)
        logger.info("trace_emitter_initialized", enabled=trace.enabled)
    return _trace_emitter


def get_report_generator(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[TenantStore, Depends(get_tenant_store)],
    templates: Annotated[TemplateCatalog, Depends(get_template_catalog)],
    catalog: Annotated[WiringCatalog, Depends(get_wiring_catalog)],
) -> WiringReportGenerator:
    """Get a report generator bound to the current stores."""
    return WiringReportGenerator(store, templates, settings, catalog)


def get_diagnoser() -> EvidenceDiagnoser:
    return EvidenceDiagnoser()


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
WiringCatalogDep = Annotated[WiringCatalog, Depends(get_wiring_catalog)]
TenantStoreDep = Annotated[TenantStore, Depends(get_tenant_store)]
TemplateCatalogDep = Annotated[TemplateCatalog, Depends(get_template_catalog)]
TraceSinkDep = Annotated[TraceSink, Depends(get_trace_sink)]
TraceEmitterDep = Annotated[TraceEmitter, Depends(get_trace_emitter)]
ReportGeneratorDep = Annotated[WiringReportGenerator, Depends(get_report_generator)]
DiagnoserDep = Annotated[EvidenceDiagnoser, Depends(get_diagnoser)]


async def start_trace_emitter() -> TraceEmitter:
    """Create the process trace emitter, register it and start its worker.

    Called from the application lifespan so events from the first request
    onward have a running drain worker on the serving loop.
    """
    emitter = get_trace_emitter(get_settings(), get_trace_sink())
    await emitter.start()
    return emitter


async def shutdown_trace_emitter() -> None:
    """Deliver pending trace events and unregister the process emitter."""
    global _trace_emitter
    if _trace_emitter is not None:
        await _trace_emitter.aclose()
        logger.info("trace_emitter_closed", dropped=_trace_emitter.dropped)
        _trace_emitter = None
    set_default_emitter(None)


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances. Pending trace events are
    delivered before the emitter is dropped.
    """
    global _tenant_store, _template_catalog, _trace_sink

    await shutdown_trace_emitter()

    _tenant_store = None
    _template_catalog = None
    _trace_sink = None
    get_settings.cache_clear()
