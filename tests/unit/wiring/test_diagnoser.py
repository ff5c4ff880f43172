"""Tests for EvidenceDiagnoser and evidence snapshots."""

from switchyard.trace.models import CorrelationKeys, TraceEvent, TraceEventType
from switchyard.wiring.declarations.flow_tree import find_invalid_edges, find_unreachable_nodes
from switchyard.wiring.diagnoser import EvidenceDiagnoser
from switchyard.wiring.models.diagnosis import (
    FORCE_LLM_DISCOVERY,
    DiagnosticRule,
    EvidenceSnapshot,
    PatchEntry,
)
from switchyard.wiring.models.enums import IssueSeverity, ResponseSource

TENANT = "tenant-diag"


def _rule(rule_id: str, condition: str, severity=IssueSeverity.LOW, patch=()) -> DiagnosticRule:
    return DiagnosticRule(
        id=rule_id,
        severity=severity,
        root_cause_node="node.callStart",
        title=rule_id,
        rule="r",
        fix="f",
        condition=condition,
        patch=patch,
    )


class TestShippedRules:
    """Tests against the shipped rule table."""

    def test_quiet_run_is_healthy(self) -> None:
        """A run with nothing unusual matches no rule."""
        diagnosis = EvidenceDiagnoser().diagnose(EvidenceSnapshot(call_id="c1"), TENANT)
        assert diagnosis.healthy
        assert diagnosis.issues == []
        assert diagnosis.patch_description == []

    def test_empty_pool(self) -> None:
        """LLM fallback with no scenarios is a single HIGH issue."""
        snapshot = EvidenceSnapshot(response_source=ResponseSource.LLM, scenario_count=0)
        diagnosis = EvidenceDiagnoser().diagnose(snapshot, TENANT)
        assert [i.rule_id for i in diagnosis.issues] == ["scenarios.empty_pool"]
        assert diagnosis.issues[0].severity == IssueSeverity.HIGH
        assert diagnosis.issues[0].root_cause_label == "Scenario Matcher"

    def test_kill_switches(self) -> None:
        """Both kill switches explain the fallback; the empty-pool rule stays quiet."""
        snapshot = EvidenceSnapshot(
            response_source=ResponseSource.LLM,
            scenario_count=12,
            force_llm_discovery=True,
            disable_scenario_auto_responses=True,
        )
        diagnosis = EvidenceDiagnoser().diagnose(snapshot, TENANT)
        assert [i.rule_id for i in diagnosis.issues] == [
            "kill_switch.force_llm_discovery",
            "kill_switch.disable_scenario_auto_responses",
        ]
        assert {p.recommended_value for p in diagnosis.patch_description} == {False}
        assert not diagnosis.healthy

    def test_low_confidence(self) -> None:
        """A discarded low-confidence match is MEDIUM."""
        snapshot = EvidenceSnapshot(
            response_source=ResponseSource.LLM, scenario_count=5, scenario_confidence=0.3
        )
        issues = EvidenceDiagnoser().diagnose(snapshot, TENANT).issues
        assert [i.rule_id for i in issues] == ["scenarios.low_confidence"]

    def test_booking_rules(self) -> None:
        """Booking intent with missing consent phrases and slots."""
        snapshot = EvidenceSnapshot(
            booking_intent_detected=True, booking_slots_count=0, consent_phrases_count=0
        )
        ids = [i.rule_id for i in EvidenceDiagnoser().diagnose(snapshot, TENANT).issues]
        assert ids == ["booking.no_slots", "consent.no_phrases"]

    def test_severity_order(self) -> None:
        """Issues sort by severity regardless of table order."""
        snapshot = EvidenceSnapshot(
            response_source=ResponseSource.LLM,
            force_llm_discovery=True,
            legacy_path_reads=2,
            registry_violations=1,
        )
        severities = [i.severity for i in EvidenceDiagnoser().diagnose(snapshot, TENANT).issues]
        assert severities == [IssueSeverity.CRITICAL, IssueSeverity.MEDIUM, IssueSeverity.LOW]

    def test_flow_tree_connected(self) -> None:
        """Every root-cause node is reachable from call start."""
        assert find_unreachable_nodes() == []
        assert find_invalid_edges() == []


class TestRuleEvaluation:
    """Tests for rule matching and patch merging."""

    def test_bad_conditions_do_not_match(self) -> None:
        """Syntax errors and unknown names evaluate to no match."""
        diagnoser = EvidenceDiagnoser(
            (
                _rule("syntax", "force_llm_discovery and"),
                _rule("unknown", "no_such_field > 1"),
                _rule("ok", "config_reads == 0"),
            )
        )
        diagnosis = diagnoser.diagnose(EvidenceSnapshot(), TENANT)
        assert [i.rule_id for i in diagnosis.issues] == ["ok"]

    def test_patch_deduplicated_by_field(self) -> None:
        """The first patch entry for a field wins."""
        first = PatchEntry(field_id=FORCE_LLM_DISCOVERY, current_value=True, recommended_value=False)
        second = PatchEntry(field_id=FORCE_LLM_DISCOVERY, current_value=True, recommended_value=None)
        diagnoser = EvidenceDiagnoser(
            (
                _rule("a", "True", IssueSeverity.HIGH, (first,)),
                _rule("b", "True", IssueSeverity.LOW, (second,)),
            )
        )
        diagnosis = diagnoser.diagnose(EvidenceSnapshot(), TENANT)
        assert diagnosis.patch_description == [first]

    def test_functions_available(self) -> None:
        """Whitelisted functions can be used in conditions."""
        diagnoser = EvidenceDiagnoser((_rule("fn", "max(config_reads, 3) == 3"),))
        assert diagnoser.diagnose(EvidenceSnapshot(), TENANT).issues


class TestSnapshotFromTrace:
    """Tests for EvidenceSnapshot.from_trace_events."""

    def test_counts_and_switches(self) -> None:
        """Counters come from event kinds; switches from read previews."""
        keys = CorrelationKeys(call_id="call-9", tenant_id=TENANT)
        events = [
            TraceEvent.create(
                TraceEventType.CONFIG_READ,
                keys,
                {"path": FORCE_LLM_DISCOVERY, "value_preview": "true"},
            ),
            TraceEvent.create(
                TraceEventType.CONFIG_READ, keys, {"path": "frontDesk.aiName", "value_preview": '"Ava"'}
            ),
            TraceEvent.create(TraceEventType.LEGACY_PATH_USED, keys, {}),
            TraceEvent.create(TraceEventType.AW_VIOLATION, keys, {}),
        ]
        snapshot = EvidenceSnapshot.from_trace_events(events, response_source=ResponseSource.LLM)
        assert snapshot.call_id == "call-9"
        assert snapshot.config_reads == 2
        assert snapshot.legacy_path_reads == 1
        assert snapshot.registry_violations == 1
        assert snapshot.force_llm_discovery is True
        assert snapshot.response_source == ResponseSource.LLM

    def test_overrides_win(self) -> None:
        """Keyword arguments replace values recovered from events."""
        keys = CorrelationKeys(call_id="call-9", tenant_id=TENANT)
        events = [
            TraceEvent.create(
                TraceEventType.CONFIG_READ,
                keys,
                {"path": FORCE_LLM_DISCOVERY, "value_preview": "true"},
            )
        ]
        snapshot = EvidenceSnapshot.from_trace_events(events, force_llm_discovery=False)
        assert snapshot.force_llm_discovery is False
