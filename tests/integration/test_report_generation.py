"""Integration tests for composite wiring report generation."""

import pytest

from switchyard.config.settings import Settings
from switchyard.tenants.models import ScenarioPool, SharedTemplate
from switchyard.tenants.stores.inmemory import InMemoryTemplateCatalog, InMemoryTenantStore
from switchyard.wiring.exceptions import DerivationError, TenantNotFoundError
from switchyard.wiring.models.enums import FieldStatus, HealthColor, Verdict
from switchyard.wiring.report import REPORT_TYPE, WiringReportGenerator
from tests.factories.tenants import (
    TENANT_ID,
    bare_tenant,
    tenant_without_template_refs,
    wired_tenant,
)

pytestmark = pytest.mark.integration


class OfflineTemplateCatalog(InMemoryTemplateCatalog):
    """Catalog whose scenario pool cannot be loaded."""

    async def get_scenario_pool(self, template_ids: list[str]) -> ScenarioPool:
        raise DerivationError("template catalog offline")


@pytest.fixture
def generator(
    tenant_store: InMemoryTenantStore, template_catalog: InMemoryTemplateCatalog
) -> WiringReportGenerator:
    return WiringReportGenerator(tenant_store, template_catalog, Settings(environment="development"))


async def _generator_for(
    record: dict, templates: InMemoryTemplateCatalog
) -> tuple[WiringReportGenerator, InMemoryTenantStore]:
    store = InMemoryTenantStore()
    await store.save(record)
    return WiringReportGenerator(store, templates, Settings(environment="development")), store


class TestReportGeneration:
    """End-to-end report generation over in-memory stores."""

    async def test_wired_tenant(self, generator: WiringReportGenerator) -> None:
        """Every section is populated from one snapshot."""
        report = await generator.generate(TENANT_ID)

        assert report.meta.report_type == REPORT_TYPE
        assert report.meta.schema_version == generator.catalog.version
        assert report.scope.tenant_id == TENANT_ID
        assert report.scope.tenant_name == "Cool Breeze HVAC"
        assert report.scope.environment == "development"
        assert report.health.overall == HealthColor.YELLOW
        assert report.tenant_safety_proof.verdict == Verdict.SAFE
        assert report.derived_data.scenario_count == 3
        assert report.scope.effective_config_version == "catalog-1"
        assert report.tenant_safety_proof.summary.total_checks == 7
        assert len(report.tier_definitions) == 3
        assert "pie title" in report.diagrams.health_summary

    async def test_environment_label(self, generator: WiringReportGenerator) -> None:
        """An explicit environment overrides the settings value."""
        report = await generator.generate(TENANT_ID, environment="staging")
        assert report.scope.environment == "staging"

    async def test_unknown_tenant(self, generator: WiringReportGenerator) -> None:
        """A missing tenant is the one failure that aborts generation."""
        with pytest.raises(TenantNotFoundError):
            await generator.generate("tenant-missing")


class TestCategoryResolution:
    """Tests for category key precedence."""

    async def test_requested_wins(self, generator: WiringReportGenerator) -> None:
        report = await generator.generate(TENANT_ID, category_hint="Plumbing")
        assert report.scope.category_key == "plumbing"
        assert report.scope.category_key_source == "requested"
        assert report.scope.requested_category_key == "Plumbing"
        assert report.scope.tenant_category_key == "hvac"

    async def test_tenant_key(self, generator: WiringReportGenerator) -> None:
        report = await generator.generate(TENANT_ID)
        assert report.scope.category_key == "hvac"
        assert report.scope.category_key_source == "tenant"

    async def test_inferred_from_first_template(
        self, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """Without a stored key, the first linked template's category is used."""
        record = wired_tenant()
        del record["aiAgentSettings"]["tradeKey"]
        generator, _ = await _generator_for(record, template_catalog)

        report = await generator.generate(TENANT_ID)

        assert report.scope.category_key == "hvac"
        assert report.scope.category_key_source == "inferredFromTemplates"
        assert report.scope.inferred_category_key == "hvac"
        assert report.scope.tenant_category_key is None

    async def test_default_category(self, template_catalog: InMemoryTemplateCatalog) -> None:
        """No key and no templates falls back to the configured default."""
        record = tenant_without_template_refs()
        del record["aiAgentSettings"]["tradeKey"]
        generator, _ = await _generator_for(record, template_catalog)

        report = await generator.generate(TENANT_ID)

        assert report.scope.category_key == "universal"
        assert report.scope.category_key_source == "default"


class TestDegradedSections:
    """Failures that degrade a section instead of the whole report."""

    async def test_scenario_pool_failure(self, shared_template: SharedTemplate) -> None:
        """An unreadable pool leaves scenarios PARTIAL and the report YELLOW."""
        generator, _ = await _generator_for(
            wired_tenant(), OfflineTemplateCatalog([shared_template])
        )

        report = await generator.generate(TENANT_ID)

        assert report.derived_data.derivation_error == "template catalog offline"
        assert report.derived_data.scenario_count == 0
        assert report.health.field("dataConfig.scenarios").status == FieldStatus.PARTIAL
        assert report.health.overall == HealthColor.YELLOW
        assert report.tenant_safety_proof.verdict == Verdict.SAFE

    async def test_missing_template(self) -> None:
        """A reference to an unknown template yields an empty pool, not an error."""
        generator, _ = await _generator_for(wired_tenant(), InMemoryTemplateCatalog())

        report = await generator.generate(TENANT_ID)

        assert report.derived_data.derivation_error is None
        assert report.derived_data.scenario_count == 0
        assert report.health.field("dataConfig.scenarios").status == FieldStatus.PARTIAL


class TestSeeding:
    """Base-field seeding performed as part of generation."""

    async def test_bare_tenant_is_seeded(
        self, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """Required defaults are written before the report reads the record."""
        generator, store = await _generator_for(bare_tenant(), template_catalog)

        report = await generator.generate(TENANT_ID)

        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"]["aiName"] == "AI Assistant"
        front_desk = stored["aiAgentSettings"]["frontDeskBehavior"]
        assert front_desk["bookingEnabled"] is True
        assert front_desk["discoveryConsent"]["forceLLMDiscovery"] is False
        assert report.effective_config.kill_switches
        assert not any(s.is_blocking for s in report.effective_config.kill_switches.values())
        # No templates linked
        assert report.health.overall == HealthColor.RED

    async def test_wired_tenant_unchanged(
        self, generator: WiringReportGenerator, tenant_store: InMemoryTenantStore
    ) -> None:
        await generator.generate(TENANT_ID)
        assert await tenant_store.get(TENANT_ID) == wired_tenant()

    async def test_legacy_settings_shape_preserved(
        self, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """A non-object agent settings value is reported on, never replaced."""
        record = bare_tenant()
        record["aiAgentSettings"] = ["legacy"]
        generator, store = await _generator_for(record, template_catalog)

        report = await generator.generate(TENANT_ID)

        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"] == ["legacy"]
        assert report.derived_data.has_template_refs is False
        assert report.scope.category_key_source == "default"
        assert report.health.overall == HealthColor.RED

    async def test_legacy_consent_value_preserved(
        self, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """Defaults under a legacy scalar are skipped; other defaults still land."""
        record = wired_tenant()
        front_desk = record["aiAgentSettings"]["frontDeskBehavior"]
        front_desk["discoveryConsent"] = "legacy-v1"
        generator, store = await _generator_for(record, template_catalog)

        await generator.generate(TENANT_ID)

        stored = await store.get(TENANT_ID)
        assert stored is not None
        assert stored["aiAgentSettings"]["frontDeskBehavior"]["discoveryConsent"] == "legacy-v1"
