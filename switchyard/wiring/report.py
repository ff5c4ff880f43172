"""Composite wiring report for one tenant.

Generation loads its own copy of the tenant record and computes every
section from that snapshot. Failures in seeding, category inference or
derivation degrade the affected section; the report is always returned.
"""

import time
from typing import Any

from switchyard.config.settings import Settings
from switchyard.observability.logging import get_logger
from switchyard.observability.metrics import REPORT_LATENCY, REPORTS_GENERATED
from switchyard.tenants.models import enabled_template_refs
from switchyard.tenants.store import TemplateCatalog, TenantStore
from switchyard.trace.models import utc_now
from switchyard.wiring.catalog import WiringCatalog, get_catalog
from switchyard.wiring.diagrams import build_diagrams
from switchyard.wiring.exceptions import TenantNotFoundError
from switchyard.wiring.health import HealthEngine
from switchyard.wiring.models.report import DerivedData, ReportMeta, ReportScope, WiringReport
from switchyard.wiring.paths import get_path
from switchyard.wiring.safety import TenantSafetyAuditor, trade_key_of
from switchyard.wiring.sections import (
    analyze_coverage,
    build_data_map,
    build_effective_config,
    build_runtime_map,
    build_scoreboard,
    build_ui_map,
)
from switchyard.wiring.seeder import seed_missing_base_fields
from switchyard.wiring.tiers import TierGate

logger = get_logger(__name__)

REPORT_TYPE = "WIRING_REPORT_V2"


class WiringReportGenerator:
    """Builds the composite report from the tenant store and template catalog."""

    def __init__(
        self,
        store: TenantStore,
        templates: TemplateCatalog,
        settings: Settings,
        catalog: WiringCatalog | None = None,
    ) -> None:
        self._store = store
        self._templates = templates
        self._settings = settings
        self._catalog = catalog or get_catalog()
        wiring = settings.wiring
        self._health = HealthEngine(self._catalog, wiring.golden_weights)
        self._safety = TenantSafetyAuditor(wiring.safety)
        self._tiers = TierGate(self._catalog, wiring.tier_weights, wiring.next_actions_limit)

    @property
    def catalog(self) -> WiringCatalog:
        return self._catalog

    async def generate(
        self,
        tenant_id: str,
        category_hint: str | None = None,
        environment: str | None = None,
    ) -> WiringReport:
        """Generate the report for one tenant.

        Args:
            tenant_id: Tenant to report on
            category_hint: Explicit category (trade) key, wins over stored values
            environment: Environment label for the report scope

        Returns:
            The composite report

        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        start_time = time.perf_counter()
        environment = environment or self._settings.environment

        record = await self._store.get(tenant_id)
        if record is None:
            raise TenantNotFoundError(tenant_id)

        record = await self._seed(tenant_id, record)
        category_key, scope_fields = await self._resolve_category(record, category_hint)
        derived = await self._derive(tenant_id, record)

        ui_map = build_ui_map(self._catalog)
        data_map = build_data_map(self._catalog, record)
        runtime_map = build_runtime_map(self._catalog)
        effective = build_effective_config(self._catalog, record)
        health = self._health.evaluate(record, derived)
        diff = self._health.diff(health)
        safety = self._safety.audit(record, tenant_id, category_key=category_key, derived=derived)
        coverage = analyze_coverage(self._catalog)
        tiers = self._tiers.evaluate(health)

        elapsed = time.perf_counter() - start_time
        report = WiringReport(
            meta=ReportMeta(
                schema_version=self._catalog.version,
                generated_at=utc_now(),
                generation_time_ms=int(elapsed * 1000),
                report_type=REPORT_TYPE,
            ),
            scope=ReportScope(
                tenant_id=tenant_id,
                tenant_name=record.get("companyName") or record.get("businessName"),
                category_key=category_key,
                environment=environment,
                effective_config_version=derived.effective_config_version,
                **scope_fields,
            ),
            scoreboard=build_scoreboard(ui_map, data_map, coverage, safety),
            ui_map=ui_map,
            data_map=data_map,
            runtime_map=runtime_map,
            effective_config=effective,
            health=health,
            diff=diff,
            tenant_safety_proof=safety,
            diagrams=build_diagrams(effective, health),
            tier_evaluation=tiers,
            tier_definitions=list(self._catalog.tiers),
            derived_data=derived,
            coverage=coverage,
        )

        REPORT_LATENCY.observe(elapsed)
        REPORTS_GENERATED.labels(health=health.overall.value).inc()
        logger.info(
            "wiring_report_generated",
            tenant_id=tenant_id,
            category_key=category_key,
            health=health.overall.value,
            current_tier=tiers.current_tier.value,
            tier_scores=tiers.tier_scores,
            verdict=safety.verdict.value,
            generation_time_ms=report.meta.generation_time_ms,
        )
        return report

    async def _seed(self, tenant_id: str, record: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await seed_missing_base_fields(self._store, tenant_id, record, self._catalog)
        except Exception as e:  # noqa: BLE001
            logger.warning("wiring_report_seed_failed", tenant_id=tenant_id, error=str(e))
            return record

        if not result.updated:
            return record
        reloaded = await self._store.get(tenant_id)
        return reloaded if reloaded is not None else record

    async def _resolve_category(
        self, record: dict[str, Any], hint: str | None
    ) -> tuple[str, dict[str, Any]]:
        """Requested hint, then the tenant's own key, then the first template's category."""
        tenant_key = trade_key_of(record)
        fields: dict[str, Any] = {
            "requested_category_key": hint,
            "tenant_category_key": tenant_key.lower() if tenant_key else None,
        }

        if hint:
            key, source = hint, "requested"
        elif tenant_key:
            key, source = tenant_key, "tenant"
        else:
            inferred = await self._infer_category(record)
            if inferred:
                key, source = inferred, "inferredFromTemplates"
                fields["inferred_category_key"] = inferred.lower()
            else:
                key, source = self._settings.wiring.default_category_key, "default"

        fields["category_key_source"] = source
        return key.lower(), fields

    async def _infer_category(self, record: dict[str, Any]) -> str | None:
        refs = get_path(record, "aiAgentSettings.templateReferences")
        if not isinstance(refs, list) or not refs or not isinstance(refs[0], dict):
            return None
        template_id = refs[0].get("templateId")
        if not template_id:
            return None
        try:
            template = await self._templates.get_template(str(template_id))
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "category_inference_failed", template_id=str(template_id), error=str(e)
            )
            return None
        return template.category_key if template is not None else None

    async def _derive(self, tenant_id: str, record: dict[str, Any]) -> DerivedData:
        refs = enabled_template_refs(record)
        derived = DerivedData(has_template_refs=bool(refs), template_count=len(refs))
        if not refs:
            return derived

        template_ids = [str(ref["templateId"]) for ref in refs if ref.get("templateId")]
        try:
            pool = await self._templates.get_scenario_pool(template_ids)
        except Exception as e:  # noqa: BLE001
            logger.warning("scenario_pool_load_failed", tenant_id=tenant_id, error=str(e))
            return derived.model_copy(update={"derivation_error": str(e)})

        derived = derived.model_copy(
            update={
                "scenario_count": len(pool.scenarios),
                "scenario_ids": [scenario.id for scenario in pool.scenarios],
                "effective_config_version": pool.effective_config_version,
            }
        )
        logger.debug(
            "derived_data_loaded",
            tenant_id=tenant_id,
            template_count=derived.template_count,
            scenario_count=derived.scenario_count,
        )
        return derived
