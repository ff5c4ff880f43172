"""Tests for Mermaid diagram builders."""

from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.diagrams import (
    SYSTEM_OVERVIEW,
    build_diagrams,
    health_pie,
    kill_switch_diagram,
)
from switchyard.wiring.health import HealthEngine
from switchyard.wiring.models.report import DerivedData, EffectiveConfig, KillSwitchState
from switchyard.wiring.sections import build_effective_config
from tests.factories.tenants import tenant_with_kill_switch, wired_tenant


class TestKillSwitchDiagram:
    """Tests for kill_switch_diagram."""

    def test_switches_off(self, catalog: WiringCatalog) -> None:
        """Scenarios are highlighted when nothing blocks them."""
        diagram = kill_switch_diagram(build_effective_config(catalog, wired_tenant()))
        assert diagram.startswith("graph LR")
        assert "frontDesk.discoveryConsent.forceLLMDiscovery: OFF" in diagram
        assert "style SCENARIOS fill:#22c55e" in diagram

    def test_switch_on(self, catalog: WiringCatalog) -> None:
        """The LLM path is highlighted when a switch blocks."""
        diagram = kill_switch_diagram(build_effective_config(catalog, tenant_with_kill_switch()))
        assert "forceLLMDiscovery: ON" in diagram
        assert "style LLM fill:#ef4444" in diagram

    def test_no_switches(self) -> None:
        """An empty switch set is labelled."""
        assert "none declared" in kill_switch_diagram(EffectiveConfig())

    def test_only_true_blocks(self) -> None:
        """Truthy non-boolean values are not blocking."""
        effective = EffectiveConfig(kill_switches={"x": KillSwitchState(value="yes")})
        assert "x: OFF" in kill_switch_diagram(effective)


class TestHealthPie:
    """Tests for health_pie."""

    def test_counts(self, catalog: WiringCatalog) -> None:
        """Pie slices carry the status counts."""
        health = HealthEngine(catalog).evaluate(
            wired_tenant(), DerivedData(has_template_refs=True, scenario_count=1)
        )
        pie = health_pie(health)
        assert pie.startswith("pie title Field Health Status")
        assert '"UI_ONLY" : 2' in pie
        assert '"MISCONFIGURED" : 0' in pie


def test_build_diagrams(catalog: WiringCatalog) -> None:
    """All three diagrams are produced."""
    record = wired_tenant()
    health = HealthEngine(catalog).evaluate(record, DerivedData())
    diagrams = build_diagrams(build_effective_config(catalog, record), health)
    assert diagrams.system_overview == SYSTEM_OVERVIEW
    assert diagrams.kill_switches.startswith("graph LR")
    assert diagrams.health_summary.startswith("pie")
