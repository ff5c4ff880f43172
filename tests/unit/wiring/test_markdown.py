"""Tests for report_to_markdown."""

from switchyard.config.settings import Settings
from switchyard.tenants.stores.inmemory import InMemoryTemplateCatalog, InMemoryTenantStore
from switchyard.wiring.markdown import report_to_markdown
from switchyard.wiring.report import WiringReportGenerator
from tests.factories.tenants import TENANT_ID, tenant_with_kill_switch


async def _markdown(
    store: InMemoryTenantStore, templates: InMemoryTemplateCatalog, **kwargs
) -> str:
    generator = WiringReportGenerator(store, templates, Settings(environment="development"))
    return report_to_markdown(await generator.generate(TENANT_ID, **kwargs))


class TestReportToMarkdown:
    """Tests for the operator-facing rendering."""

    async def test_wired_tenant(
        self, tenant_store: InMemoryTenantStore, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """Headline facts and every section heading are present."""
        text = await _markdown(tenant_store, template_catalog)
        assert text.startswith("# Wiring Report: Cool Breeze HVAC")
        assert f"**Tenant ID:** {TENANT_ID}" in text
        assert "**Category:** hvac (tenant)" in text
        assert "**Health:** YELLOW" in text
        for heading in ("## Scoreboard", "## Kill Switches", "## Tenant Safety", "## Readiness Tiers"):
            assert heading in text
        assert "## 🔴 Critical Issues" not in text
        assert "**Verdict:** ✅ SAFE" in text
        assert "```mermaid" in text

    async def test_requested_category(
        self, tenant_store: InMemoryTenantStore, template_catalog: InMemoryTemplateCatalog
    ) -> None:
        """An explicit category is reported with its source."""
        text = await _markdown(tenant_store, template_catalog, category_hint="Plumbing")
        assert "**Category:** plumbing (requested)" in text

    async def test_kill_switch_tenant(self, template_catalog: InMemoryTemplateCatalog) -> None:
        """Blocking switches and critical next actions are called out."""
        store = InMemoryTenantStore()
        await store.save(tenant_with_kill_switch())
        text = await _markdown(store, template_catalog)
        assert "frontDesk.discoveryConsent.forceLLMDiscovery**: true (BLOCKING)" in text
        assert "### Next Actions" in text
        assert "[MVA]" in text
        assert "**CRITICAL**" in text
        assert "🔒" in text
