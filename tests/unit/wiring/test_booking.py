"""Tests for BookingConfigResolver."""

from typing import Any

from switchyard.config.settings import Settings
from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.models import TraceEventType
from switchyard.trace.stores.inmemory import InMemoryTraceSink
from switchyard.wiring.booking import (
    DEFAULT_CONSENT_QUESTION,
    DEFAULT_INTENT_PATTERNS,
    READER_ID,
    BookingConfigResolver,
)
from switchyard.wiring.reader import ConfigReader
from tests.factories.tenants import TENANT_ID, legacy_consent_tenant, wired_tenant

FD = "aiAgentSettings__frontDeskBehavior"


def _resolver(record: dict[str, Any], emitter: TraceEmitter | None = None) -> BookingConfigResolver:
    reader = ConfigReader(
        call_id="call-booking",
        tenant_id=TENANT_ID,
        tenant_record=record,
        reader_id="Caller",
        enforcement_mode="throw",
        emitter=emitter,
        settings=Settings(environment="development"),
    )
    return BookingConfigResolver.for_call(reader)


class TestBookingConfig:
    """Tests for the assembled booking configuration."""

    def test_wired_tenant(self) -> None:
        """Core switches and consent come from the tenant record."""
        config = _resolver(wired_tenant()).get_booking_config()
        assert config.enabled is True
        assert config.requires_explicit_consent is True
        assert config.consent.phrases[0] == "yes"
        assert config.consent.question == DEFAULT_CONSENT_QUESTION
        assert config.fast_path["enabled"] is True

    def test_booking_disabled(self) -> None:
        """An explicit false disables booking."""
        record = wired_tenant(**{f"{FD}__bookingEnabled": False})
        assert _resolver(record).get_booking_config().enabled is False

    def test_cached_until_cleared(self) -> None:
        """Resolution happens once per call until the cache is cleared."""
        resolver = _resolver(wired_tenant())
        first = resolver.get_booking_config()
        reads = len(resolver._reader.reads)
        assert resolver.get_booking_config() is first
        assert len(resolver._reader.reads) == reads
        resolver.clear_cache()
        assert resolver.get_booking_config() is not first

    def test_reader_id_restored(self) -> None:
        """Reads are attributed to the resolver, then the caller's id is restored."""
        resolver = _resolver(wired_tenant())
        resolver.get_booking_config()
        reader = resolver._reader
        assert reader.reader_id == "Caller"
        assert {r.reader_id for r in reader.reads} == {READER_ID}
        assert reader.violations == []


class TestSlots:
    """Tests for slot registry and booking flow merging."""

    def test_no_registry_means_no_slots(self) -> None:
        """Slots are empty when either half is missing."""
        assert _resolver(wired_tenant()).get_slots() == []

    def test_steps_merged_by_slot_id(self) -> None:
        """Each slot picks up its flow step."""
        record = wired_tenant(
            **{
                f"{FD}__slotRegistry": {"slots": [{"id": "name", "type": "name"}, {"id": "zip"}]},
                f"{FD}__bookingFlow": {"steps": [{"slotId": "name", "ask": "Your name?"}]},
            }
        )
        slots = _resolver(record).get_slots()
        assert slots[0] == {"id": "name", "type": "name", "slotId": "name", "ask": "Your name?"}
        assert slots[1] == {"id": "zip"}


class TestPromptsAndTemplates:
    """Tests for prompt and template precedence."""

    def test_defaults(self) -> None:
        """Without configuration the hardcoded defaults are reported."""
        templates = _resolver(wired_tenant()).get_templates()
        assert templates.confirmation is None
        assert templates.confirmation_source == "hardcoded_default"

    def test_behavior_beats_outcome(self) -> None:
        """bookingBehavior wins, then bookingOutcome, then outcome scripts."""
        record = wired_tenant(
            **{
                f"{FD}__bookingBehavior": {"confirmationPrompt": "Behavior confirm"},
                f"{FD}__bookingOutcome": {
                    "confirmationPrompt": "Outcome confirm",
                    "scripts": {"booking_complete": "Script complete"},
                },
            }
        )
        resolver = _resolver(record)
        templates = resolver.get_templates()
        assert templates.confirmation == "Behavior confirm"
        assert templates.confirmation_source == "bookingBehavior"
        assert templates.completion == "Script complete"
        assert templates.completion_source == "bookingOutcome.scripts"
        assert resolver.get_prompts().confirm_template == "Behavior confirm"


class TestIntentPatterns:
    """Tests for booking intent patterns."""

    def test_defaults_when_unconfigured(self) -> None:
        """The built-in pattern list applies when nothing is configured."""
        patterns = _resolver(wired_tenant()).get_intent_patterns()
        assert patterns.use_defaults
        assert patterns.all == list(DEFAULT_INTENT_PATTERNS)
        assert patterns.source == "hardcoded_defaults"

    def test_configured_patterns_replace_defaults(self) -> None:
        """Configured triggers replace the defaults entirely."""
        record = wired_tenant(
            **{f"{FD}__detectionTriggers__directIntentPatterns": ["need a visit"]}
        )
        patterns = _resolver(record).get_intent_patterns()
        assert patterns.all == ["need a visit"]
        assert patterns.source == "frontDesk.detectionTriggers.directIntentPatterns"


class TestAddressVerification:
    """Tests for address verification with legacy bridges."""

    def test_slot_bridge_fills_keys(self) -> None:
        """Unit settings come from the legacy address slot."""
        config = _resolver(wired_tenant()).get_address_verification()
        assert config.source == "legacyBridge"
        assert config.require_unit_question is True
        assert config.unit_question_mode == "smart"
        assert config.enabled is True
        assert config.provider == "google_geocode"

    def test_canonical_block_wins(self) -> None:
        """Keys present in the canonical block are not bridged."""
        record = wired_tenant(
            **{
                f"{FD}__booking__addressVerification": {
                    "enabled": False,
                    "provider": "smarty",
                    "requireUnitQuestion": False,
                    "unitQuestionMode": "never",
                }
            }
        )
        config = _resolver(record).get_address_verification()
        assert config.source == "booking.addressVerification"
        assert config.enabled is False
        assert config.provider == "smarty"
        assert config.require_unit_question is False

    def test_old_block_bridged(self) -> None:
        """The pre-migration location is used when the canonical block is empty."""
        record = wired_tenant(
            aiAgentSettings__frontDesk__booking__addressVerification={
                "enabled": True,
                "provider": "legacy_geo",
                "requireZip": True,
            }
        )
        config = _resolver(record).get_address_verification()
        assert config.source == "legacyBridge"
        assert config.provider == "legacy_geo"
        assert config.require_zip is True


class TestConsent:
    """Tests for the consent gate configuration."""

    def test_legacy_consent_words_bridged(self) -> None:
        """Phrases stored under the old key still reach the consent gate."""
        resolver = _resolver(legacy_consent_tenant())
        assert "go ahead" in resolver.get_consent_config().phrases
        assert any(r.legacy_path for r in resolver._reader.reads)

    def test_default_phrases_for_bare_tenant(self) -> None:
        """A tenant without phrases gets the declared default list."""
        config = _resolver({"_id": TENANT_ID}).get_consent_config()
        assert config.phrases
        assert config.required is True


class TestResolvedEvent:
    """Tests for the BOOKING_CONFIG_RESOLVED event."""

    async def test_event_emitted_once(
        self, emitter: TraceEmitter, trace_sink: InMemoryTraceSink
    ) -> None:
        """The summary event is emitted on first resolution only."""
        resolver = _resolver(wired_tenant(), emitter=emitter)
        resolver.get_booking_config()
        resolver.get_booking_config()
        await emitter.flush()
        events = [
            e for e in trace_sink.events if e.event_type == TraceEventType.BOOKING_CONFIG_RESOLVED
        ]
        assert len(events) == 1
        assert events[0].reader_id == READER_ID
        assert events[0].data["address_verification_source"] == "legacyBridge"
        assert events[0].data["intent_pattern_source"] == "hardcoded_defaults"
