"""Failure to root-cause table.

Each condition is an expression over ``EvidenceSnapshot`` fields. The table
is flat and ordered; the diagnoser collects every match.
"""

from switchyard.wiring.models.diagnosis import (
    BOOKING_ENABLED,
    DISABLE_AUTO_RESPONSES,
    FAST_PATH_ENABLED,
    FORCE_LLM_DISCOVERY,
    DiagnosticRule,
    PatchEntry,
)
from switchyard.wiring.models.enums import IssueSeverity

FORCE_LLM_KILL_SWITCH = DiagnosticRule(
    id="kill_switch.force_llm_discovery",
    severity=IssueSeverity.CRITICAL,
    root_cause_node="node.scenarioMatcher",
    title="Scenarios bypassed: forceLLMDiscovery is ON",
    rule="When forceLLMDiscovery is true the scenario matcher is skipped and every "
    "discovery turn goes to the LLM.",
    fix="Front Desk > Discovery & Consent: turn OFF 'Force LLM Discovery'.",
    condition="force_llm_discovery and response_source == 'LLM'",
    patch=(PatchEntry(field_id=FORCE_LLM_DISCOVERY, current_value=True, recommended_value=False),),
)

AUTO_RESPONSES_KILL_SWITCH = DiagnosticRule(
    id="kill_switch.disable_scenario_auto_responses",
    severity=IssueSeverity.CRITICAL,
    root_cause_node="node.scenarioResponse",
    title="Scenario replies disabled: disableScenarioAutoResponses is ON",
    rule="Scenarios may match but their replies are suppressed, so the LLM speaks instead.",
    fix="Front Desk > Discovery & Consent: turn OFF 'Disable Scenario Auto-Responses'.",
    condition="disable_scenario_auto_responses and response_source == 'LLM'",
    patch=(
        PatchEntry(field_id=DISABLE_AUTO_RESPONSES, current_value=True, recommended_value=False),
    ),
)

EMPTY_POOL_FALLBACK = DiagnosticRule(
    id="scenarios.empty_pool",
    severity=IssueSeverity.HIGH,
    root_cause_node="node.scenarioMatcher",
    title="LLM fallback: no scenarios in the tenant's pool",
    rule="The scenario matcher had nothing to match against, so the turn fell through "
    "to the LLM.",
    fix="Data & Config > Template References: link and enable at least one template "
    "that contains scenarios.",
    condition=(
        "response_source == 'LLM' and scenario_count == 0 "
        "and not force_llm_discovery and not disable_scenario_auto_responses"
    ),
)

LOW_CONFIDENCE_FALLBACK = DiagnosticRule(
    id="scenarios.low_confidence",
    severity=IssueSeverity.MEDIUM,
    root_cause_node="node.scenarioMatcher",
    title="LLM fallback: best scenario match was below the confidence threshold",
    rule="A scenario scored below the minimum confidence and was discarded.",
    fix="Add trigger phrases matching this caller wording to the closest scenario, "
    "or review the minimum confidence threshold.",
    condition=(
        "response_source == 'LLM' and scenario_count > 0 "
        "and scenario_confidence is not None and scenario_confidence < min_scenario_confidence"
    ),
)

EMPTY_UTTERANCE_TO_LLM = DiagnosticRule(
    id="guard.empty_utterance",
    severity=IssueSeverity.MEDIUM,
    root_cause_node="node.emptyUtteranceGuard",
    title="Empty utterance was sent to the LLM",
    rule="An empty or noise-only utterance should be handled by the silence handler, "
    "not routed to the LLM.",
    fix="Front Desk > Silence Handling: configure a silence prompt so empty turns are "
    "answered without the LLM.",
    condition="user_utterance_empty and response_source == 'LLM'",
)

BOOKING_DISABLED = DiagnosticRule(
    id="booking.disabled",
    severity=IssueSeverity.HIGH,
    root_cause_node="node.directBookingIntentDetector",
    title="Caller asked to book but booking is disabled",
    rule="Booking intent was detected but bookingEnabled is false, so no booking flow "
    "could start.",
    fix="Front Desk > Booking: turn ON 'Booking Enabled'.",
    condition="booking_intent_detected and not booking_enabled",
    patch=(PatchEntry(field_id=BOOKING_ENABLED, current_value=False, recommended_value=True),),
)

BOOKING_NO_SLOTS = DiagnosticRule(
    id="booking.no_slots",
    severity=IssueSeverity.HIGH,
    root_cause_node="node.bookingRunner",
    title="Booking started with no slots configured",
    rule="The booking runner has nothing to collect, so the booking cannot complete.",
    fix="Front Desk > Booking Slots: add at least a name, phone and address slot, each "
    "with a question.",
    condition="booking_intent_detected and booking_enabled and booking_slots_count == 0",
)

CONSENT_WITHOUT_PHRASES = DiagnosticRule(
    id="consent.no_phrases",
    severity=IssueSeverity.HIGH,
    root_cause_node="node.consentGate",
    title="Explicit consent required but no consent phrases configured",
    rule="The consent gate waits for a consent phrase that can never match, so booking "
    "never starts.",
    fix="Front Desk > Discovery & Consent: add consent phrases such as 'yes', "
    "'sounds good', 'book it'.",
    condition=(
        "booking_intent_detected and requires_explicit_consent and consent_phrases_count == 0"
    ),
)

FAST_PATH_DISABLED = DiagnosticRule(
    id="fast_path.disabled",
    severity=IssueSeverity.LOW,
    root_cause_node="node.fastPathIntentDetector",
    title="Fast-path keyword heard but fast path is disabled",
    rule="The caller used a fast-path keyword; with fast path off the call went through "
    "full discovery instead of an immediate booking offer.",
    fix="Front Desk > Fast Path Booking: turn ON 'Fast Path Enabled'.",
    condition="fast_path_keyword_hit and not fast_path_enabled",
    patch=(PatchEntry(field_id=FAST_PATH_ENABLED, current_value=False, recommended_value=True),),
)

REGISTRY_VIOLATIONS = DiagnosticRule(
    id="wiring.registry_violations",
    severity=IssueSeverity.MEDIUM,
    root_cause_node="node.callStart",
    title="Runtime read configuration paths that are not in the registry",
    rule="Unregistered reads are invisible to the admin UI and cannot be configured "
    "per tenant.",
    fix="Declare the reported paths in the wiring registry or remove the reads.",
    condition="registry_violations > 0",
)

LEGACY_PATH_USAGE = DiagnosticRule(
    id="wiring.legacy_paths",
    severity=IssueSeverity.LOW,
    root_cause_node="node.callStart",
    title="Runtime relied on legacy configuration paths",
    rule="Values were served from legacy storage through a bridge; the canonical paths "
    "are empty.",
    fix="Re-save the affected settings in the admin UI to migrate them to canonical paths.",
    condition="legacy_path_reads > 0",
)

DIAGNOSTIC_RULES: tuple[DiagnosticRule, ...] = (
    FORCE_LLM_KILL_SWITCH,
    AUTO_RESPONSES_KILL_SWITCH,
    EMPTY_POOL_FALLBACK,
    LOW_CONFIDENCE_FALLBACK,
    EMPTY_UTTERANCE_TO_LLM,
    BOOKING_DISABLED,
    BOOKING_NO_SLOTS,
    CONSENT_WITHOUT_PHRASES,
    FAST_PATH_DISABLED,
    REGISTRY_VIOLATIONS,
    LEGACY_PATH_USAGE,
)
