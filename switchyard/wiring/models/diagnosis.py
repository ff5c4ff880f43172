"""Evidence diagnosis models.

An evidence snapshot is the normalized view of one observed run. Rules are
static data; their conditions are expressions over the snapshot's fields.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from switchyard.trace.models import TraceEvent, TraceEventType
from switchyard.wiring.models.enums import IssueSeverity, ResponseSource

FORCE_LLM_DISCOVERY = "frontDesk.discoveryConsent.forceLLMDiscovery"
DISABLE_AUTO_RESPONSES = "frontDesk.discoveryConsent.disableScenarioAutoResponses"
BOOKING_ENABLED = "frontDesk.bookingEnabled"
REQUIRES_EXPLICIT_CONSENT = "frontDesk.discoveryConsent.bookingRequiresExplicitConsent"
FAST_PATH_ENABLED = "frontDesk.fastPathBooking.enabled"

# Boolean snapshot fields recovered from CONFIG_READ previews
_BOOLEAN_READS = {
    FORCE_LLM_DISCOVERY: "force_llm_discovery",
    DISABLE_AUTO_RESPONSES: "disable_scenario_auto_responses",
    BOOKING_ENABLED: "booking_enabled",
    REQUIRES_EXPLICIT_CONSENT: "requires_explicit_consent",
    FAST_PATH_ENABLED: "fast_path_enabled",
}


class EvidenceSnapshot(BaseModel):
    """What one observed run did, reduced to the facts the rules test."""

    call_id: str | None = Field(default=None, description="Observed call")
    response_source: ResponseSource | None = Field(
        default=None, description="Component that produced the response"
    )
    user_utterance_empty: bool = Field(default=False, description="Caller said nothing usable")

    scenario_count: int = Field(default=0, ge=0, description="Scenarios in the tenant's pool")
    template_count: int = Field(default=0, ge=0, description="Linked templates")
    matched_scenario_id: str | None = Field(default=None, description="Scenario that matched")
    scenario_confidence: float | None = Field(default=None, description="Best match confidence")
    min_scenario_confidence: float = Field(
        default=0.6, description="Confidence below which a match is discarded"
    )

    force_llm_discovery: bool = Field(default=False, description="Kill switch state")
    disable_scenario_auto_responses: bool = Field(default=False, description="Kill switch state")

    booking_intent_detected: bool = Field(default=False, description="Caller asked to book")
    booking_enabled: bool = Field(default=True, description="Booking master switch")
    booking_slots_count: int = Field(default=0, ge=0, description="Configured booking slots")
    requires_explicit_consent: bool = Field(default=True, description="Consent gate active")
    consent_phrases_count: int = Field(default=0, ge=0, description="Configured consent phrases")

    fast_path_enabled: bool = Field(default=True, description="Fast-path switch")
    fast_path_keyword_hit: bool = Field(
        default=False, description="A fast-path keyword appeared in the utterance"
    )

    config_reads: int = Field(default=0, ge=0, description="CONFIG_READ events in the run")
    legacy_path_reads: int = Field(default=0, ge=0, description="LEGACY_PATH_USED events")
    registry_violations: int = Field(default=0, ge=0, description="AW_VIOLATION events")

    @classmethod
    def from_trace_events(
        cls, events: Iterable[TraceEvent], **overrides: Any
    ) -> "EvidenceSnapshot":
        """Build a snapshot from one call's trace events.

        Counters come from event kinds; switch states come from the previews
        of the last CONFIG_READ of each switch path. Keyword arguments win.
        """
        values: dict[str, Any] = {
            "config_reads": 0,
            "legacy_path_reads": 0,
            "registry_violations": 0,
        }
        for event in events:
            if values.get("call_id") is None:
                values["call_id"] = event.call_id
            if event.event_type == TraceEventType.CONFIG_READ:
                values["config_reads"] += 1
                field_name = _BOOLEAN_READS.get(event.data.get("path", ""))
                preview = event.data.get("value_preview")
                if field_name is not None and preview in ("true", "false"):
                    values[field_name] = preview == "true"
            elif event.event_type == TraceEventType.LEGACY_PATH_USED:
                values["legacy_path_reads"] += 1
            elif event.event_type == TraceEventType.AW_VIOLATION:
                values["registry_violations"] += 1
        values.update(overrides)
        return cls(**values)


class PatchEntry(BaseModel):
    """A field value change that remediates an issue."""

    model_config = ConfigDict(frozen=True)

    field_id: str
    current_value: Any = None
    recommended_value: Any = None


class DiagnosticRule(BaseModel):
    """One row of the failure to root-cause table."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable rule identifier")
    severity: IssueSeverity
    root_cause_node: str = Field(..., description="Flow node where the failure originates")
    title: str
    rule: str = Field(..., description="Why the observed behavior follows")
    fix: str = Field(..., description="Exact remediation")
    condition: str = Field(..., description="Expression over snapshot fields")
    patch: tuple[PatchEntry, ...] = Field(default_factory=tuple)


class DiagnosedIssue(BaseModel):
    """A matched rule."""

    rule_id: str
    severity: IssueSeverity
    root_cause_node: str
    root_cause_label: str | None = None
    title: str
    rule: str
    fix: str
    patch: list[PatchEntry] = Field(default_factory=list)


class Diagnosis(BaseModel):
    """Result of explaining one observed run."""

    tenant_id: str
    healthy: bool
    evidence: EvidenceSnapshot
    issues: list[DiagnosedIssue] = Field(default_factory=list)
    patch_description: list[PatchEntry] = Field(default_factory=list)
