"""Tests for TenantSafetyAuditor."""

from typing import Any

import pytest

from switchyard.config.models.wiring import SafetyConfig
from switchyard.wiring.models.enums import CheckSeverity, CheckStatus, Verdict
from switchyard.wiring.models.report import DerivedData
from switchyard.wiring.safety import TenantSafetyAuditor, trade_key_of
from tests.factories.tenants import FRONT_DESK, TEMPLATE_ID, TENANT_ID, wired_tenant

GREETINGS = "aiAgentSettings__frontDeskBehavior__greetingResponses"


@pytest.fixture
def auditor() -> TenantSafetyAuditor:
    return TenantSafetyAuditor()


def _check(proof, check_id: str):
    return next(c for c in proof.checks if c.id == check_id)


class TestVerdict:
    """Tests for the overall verdict."""

    def test_wired_tenant_is_safe(self, auditor: TenantSafetyAuditor) -> None:
        """A tenant holding references only passes every check."""
        proof = auditor.audit(wired_tenant(), TENANT_ID, category_key="hvac")
        assert proof.verdict == Verdict.SAFE
        assert proof.passed
        assert proof.violations == []
        assert proof.summary.passed == proof.summary.total_checks == 7

    def test_checks_run_in_declared_order(self, auditor: TenantSafetyAuditor) -> None:
        """Check results follow the fixed battery order."""
        proof = auditor.audit(wired_tenant(), TENANT_ID, category_key="hvac")
        assert [c.id for c in proof.checks] == auditor.check_ids
        assert auditor.check_ids[0] == "COMPANY_ID_MATCH"

    def test_id_mismatch_is_unsafe(self, auditor: TenantSafetyAuditor) -> None:
        """A record answering for another tenant is critical."""
        proof = auditor.audit(wired_tenant(), "someone-else", category_key="hvac")
        assert proof.verdict == Verdict.UNSAFE
        assert _check(proof, "COMPANY_ID_MATCH").detail == {
            "expected": "someone-else",
            "actual": TENANT_ID,
        }

    def test_warnings_alone_stay_safe(self, auditor: TenantSafetyAuditor) -> None:
        """WARNING failures never flip the verdict."""
        record = wired_tenant()
        del record["aiAgentSettings"]["tradeKey"]
        proof = auditor.audit(record, TENANT_ID, category_key="universal")
        assert proof.verdict == Verdict.SAFE
        assert proof.summary.warnings == 1
        assert proof.violations[0].rule == "TRADE_KEY_SET"


class TestSharedContentChecks:
    """Tests for checks that detect copied shared content."""

    def test_embedded_scenarios(self, auditor: TenantSafetyAuditor) -> None:
        """Scenario bodies inside template refs are critical."""
        record = wired_tenant(
            aiAgentSettings__templateReferences=[
                {"templateId": TEMPLATE_ID, "enabled": True, "scenarios": [{"id": "s1"}]}
            ]
        )
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        assert proof.verdict == Verdict.UNSAFE
        assert _check(proof, "NO_EMBEDDED_SCENARIOS").detail["offending_refs"] == [TEMPLATE_ID]
        assert proof.scope_proof.no_embedded_scenario_bodies is False

    def test_scenario_text(self, auditor: TenantSafetyAuditor) -> None:
        """Trigger and quick-reply arrays together mean copied scenario text."""
        record = wired_tenant(
            aiAgentSettings__customScenario={"triggers": ["ac broken"], "quickReplies": ["ok"]}
        )
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        assert _check(proof, "NO_SCENARIO_TEXT").status == CheckStatus.FAILED
        assert proof.verdict == Verdict.UNSAFE

    def test_lone_triggers_allowed(self, auditor: TenantSafetyAuditor) -> None:
        """Confirmation-request triggers alone are ordinary configuration."""
        proof = auditor.audit(wired_tenant(), TENANT_ID, category_key="hvac")
        assert _check(proof, "NO_SCENARIO_TEXT").passed

    def test_direct_resources(self, auditor: TenantSafetyAuditor) -> None:
        """Top-level shared resources are critical."""
        record = wired_tenant(categories=[{"id": "cat-1"}])
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        check = _check(proof, "COMPANY_STORES_REFS_ONLY")
        assert not check.passed
        assert check.severity == CheckSeverity.CRITICAL
        assert check.detail["direct_resources"] == ["categories"]


class TestTextChecks:
    """Tests for placeholder and hardcoded-data checks."""

    def test_unknown_placeholder(self, auditor: TenantSafetyAuditor) -> None:
        """Unknown tokens are listed in the violation message."""
        record = wired_tenant(**{GREETINGS: [{"trigger": "hi", "response": "Hi from {shopName}"}]})
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        violation = next(v for v in proof.violations if v.rule == "PLACEHOLDERS_ALLOWLIST")
        assert violation.message.endswith(": shopName")

    def test_other_tenant_name(self, auditor: TenantSafetyAuditor) -> None:
        """Another tenant's business name in responses is flagged."""
        record = wired_tenant(
            **{GREETINGS: [{"trigger": "hi", "response": "Welcome to Penguin Air!"}]}
        )
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        check = _check(proof, "NO_HARDCODED_COMPANY_DATA")
        assert not check.passed
        assert check.detail["findings"] == [f"{FRONT_DESK}.greetingResponses: business name"]
        assert proof.verdict == Verdict.SAFE

    def test_own_name_allowed(self) -> None:
        """A tenant may spell out its own name."""
        auditor = TenantSafetyAuditor(SafetyConfig(known_tenant_names=["Cool Breeze HVAC"]))
        record = wired_tenant(
            **{GREETINGS: [{"trigger": "hi", "response": "Welcome to Cool Breeze HVAC"}]}
        )
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        assert _check(proof, "NO_HARDCODED_COMPANY_DATA").passed

    def test_phone_number(self, auditor: TenantSafetyAuditor) -> None:
        """Literal phone numbers belong in placeholders."""
        record = wired_tenant(
            aiAgentSettings__frontDeskBehavior__fallbackResponses={"generic": "Call +15551234567"}
        )
        proof = auditor.audit(record, TENANT_ID, category_key="hvac")
        assert not _check(proof, "NO_HARDCODED_COMPANY_DATA").passed


class FailingAuditor(TenantSafetyAuditor):
    def _check_trade_key(self, record: dict[str, Any], _tenant_id: str) -> Any:
        raise RuntimeError("trade lookup exploded")


class TestCheckErrors:
    """A check that raises is recorded, not propagated."""

    def test_error_counts_as_failed(self) -> None:
        """ERROR checks are failures with the exception captured."""
        proof = FailingAuditor().audit(wired_tenant(), TENANT_ID, category_key="hvac")
        check = _check(proof, "TRADE_KEY_SET")
        assert check.status == CheckStatus.ERROR
        assert check.passed is False
        assert check.detail == {"error": "trade lookup exploded"}
        assert proof.summary.failed == 1
        assert proof.verdict == Verdict.SAFE
        assert len(proof.checks) == 7


class TestScopeProof:
    """Tests for the scope proof."""

    def test_references_only(self, auditor: TenantSafetyAuditor) -> None:
        """The proof lists template and scenario ids, never bodies."""
        derived = DerivedData(has_template_refs=True, scenario_ids=["scn-1", "scn-2"])
        proof = auditor.audit(wired_tenant(), TENANT_ID, category_key="hvac", derived=derived)
        scope = proof.scope_proof
        assert scope.category_key == "hvac"
        assert scope.template_ids_used == [TEMPLATE_ID]
        assert scope.templates_used[0]["name"] == "HVAC Complete"
        assert scope.scenario_ids_used == ["scn-1", "scn-2"]
        assert scope.no_embedded_scenario_bodies


class TestTradeKey:
    """Tests for trade_key_of."""

    def test_lookup_order(self) -> None:
        """The agent-settings key wins over top-level keys."""
        assert trade_key_of(wired_tenant(tradeKey="plumbing")) == "hvac"
        assert trade_key_of({"trade": " electrical "}) == "electrical"
        assert trade_key_of({"tradeKey": "  "}) is None
