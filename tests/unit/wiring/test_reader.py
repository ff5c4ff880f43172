"""Tests for ConfigReader."""

import pytest

from switchyard.config.settings import Settings
from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.models import TraceEventType
from switchyard.trace.stores.inmemory import InMemoryTraceSink
from switchyard.wiring.catalog import WiringCatalog
from switchyard.wiring.exceptions import RegistryViolationError
from switchyard.wiring.models.enums import EnforcementMode, Provenance
from switchyard.wiring.reader import (
    ConfigReader,
    configured_enforcement_mode,
    get_default_emitter,
    get_process_enforcement_mode,
    is_registered,
    quick_read,
    registered_paths,
    set_default_emitter,
    set_process_enforcement_mode,
)
from tests.factories.tenants import TENANT_ID, legacy_consent_tenant, wired_tenant


def _reader(record=None, settings=None, **kwargs) -> ConfigReader:
    return ConfigReader(
        call_id="call-1",
        tenant_id=TENANT_ID,
        tenant_record=record if record is not None else wired_tenant(),
        settings=settings or Settings(environment="development"),
        **kwargs,
    )


class TestEnforcementPrecedence:
    """Explicit > tenant > process override > settings > environment."""

    def test_environment_default_development(self) -> None:
        """Non-production environments throw."""
        assert _reader().enforcement_mode == EnforcementMode.THROW

    def test_environment_default_production(self) -> None:
        """Production environments warn."""
        reader = _reader(settings=Settings(environment="production"))
        assert reader.enforcement_mode == EnforcementMode.WARN

    def test_settings_beat_environment(self) -> None:
        """A configured mode overrides the environment default."""
        settings = Settings(environment="production", wiring={"enforcement_mode": "off"})
        assert configured_enforcement_mode(settings) == EnforcementMode.OFF

    def test_process_override_beats_settings(self) -> None:
        """The process override wins over configuration."""
        settings = Settings(environment="development", wiring={"enforcement_mode": "off"})
        set_process_enforcement_mode("warn")
        assert get_process_enforcement_mode() == EnforcementMode.WARN
        assert _reader(settings=settings).enforcement_mode == EnforcementMode.WARN

    def test_tenant_beats_process_override(self) -> None:
        """A tenant setting wins over the process override."""
        set_process_enforcement_mode(EnforcementMode.THROW)
        record = wired_tenant(aiAgentSettings__infra__aw__enforcementMode="off")
        assert _reader(record).enforcement_mode == EnforcementMode.OFF

    def test_explicit_beats_tenant(self) -> None:
        """An explicit argument always wins."""
        record = wired_tenant(aiAgentSettings__infra__aw__enforcementMode="off")
        reader = _reader(record, enforcement_mode="throw")
        assert reader.enforcement_mode == EnforcementMode.THROW

    def test_invalid_tenant_mode_ignored(self) -> None:
        """Unknown tenant values fall through to configuration."""
        record = wired_tenant(aiAgentSettings__infra__aw__enforcementMode="loud")
        assert _reader(record).enforcement_mode == EnforcementMode.THROW


class TestEnforcement:
    """Tests for registry checks on each read."""

    def test_throw_aborts_unregistered_read(self) -> None:
        """Throw mode raises before resolving."""
        reader = _reader(enforcement_mode="throw", reader_id="Engine.turn")
        with pytest.raises(RegistryViolationError) as exc_info:
            reader.read("frontDesk.notAThing")
        assert exc_info.value.path == "frontDesk.notAThing"
        assert exc_info.value.reader_id == "Engine.turn"
        assert reader.reads == []
        assert len(reader.violations) == 1

    def test_warn_records_and_resolves(self) -> None:
        """Warn mode records the violation and still returns a result."""
        reader = _reader(enforcement_mode="warn")
        resolution = reader.read("frontDesk.notAThing")
        assert resolution.is_absent
        assert reader.violations[0].reason == "unregistered"
        assert len(reader.reads) == 1

    def test_off_skips_checks(self) -> None:
        """Off mode records nothing."""
        reader = _reader(enforcement_mode="off")
        reader.read("frontDesk.notAThing")
        assert reader.violations == []

    def test_sub_path_of_registered_field_allowed(self) -> None:
        """Reading inside a declared value is not a violation."""
        reader = _reader(enforcement_mode="throw")
        assert reader.get("frontDesk.bookingSlots.0.question") == "May I have your full name?"
        assert reader.violations == []

    def test_tenant_allowlist(self) -> None:
        """Allow-listed paths pass in throw mode."""
        record = wired_tenant(
            aiAgentSettings__infra__strictConfigRegistry__allowlist=["experimental.flag"]
        )
        reader = _reader(record, enforcement_mode="throw")
        assert reader.get("experimental.flag", "fallback") == "fallback"
        assert reader.violations == []

    def test_dead_reads_allowed_by_default(self) -> None:
        """Consumption-only paths are known paths."""
        reader = _reader(enforcement_mode="throw")
        reader.read("llm0Controls.silenceHandling.thresholdSeconds")
        assert reader.violations == []

    def test_block_dead_reads(self) -> None:
        """A tenant can reject consumption-only paths."""
        record = wired_tenant(aiAgentSettings__infra__strictConfigRegistry__blockDeadReads=True)
        reader = _reader(record, enforcement_mode="warn")
        reader.read("frontDesk.connectionQualityGate")
        assert reader.violations[0].reason == "dead_read"


class TestReads:
    """Tests for the read helpers."""

    def test_read_records_provenance(self) -> None:
        """Each read lands in the read log with a hash and preview."""
        reader = _reader(reader_id="Greeter").set_turn(2)
        reader.read("frontDesk.aiName")
        (record,) = reader.reads
        assert record.reader_id == "Greeter"
        assert record.turn == 2
        assert record.resolved_from == Provenance.TENANT_RECORD
        assert record.value_hash.startswith("sha256:")
        assert record.value_preview == '"Ava"'

    def test_get_default_only_when_absent(self) -> None:
        """A declared default beats the caller's default."""
        reader = _reader(wired_tenant(aiAgentSettings__aiName=""))
        assert reader.get("frontDesk.aiName", "Caller Default") == "AI Assistant"
        assert reader.get("dataConfig.placeholders.missing", "x") == "x"

    def test_boolean_helpers(self) -> None:
        """is_enabled and is_disabled require real booleans."""
        reader = _reader()
        assert reader.is_enabled("frontDesk.bookingEnabled")
        assert reader.is_disabled("frontDesk.discoveryConsent.forceLLMDiscovery")
        assert not reader.is_enabled("frontDesk.aiName")

    def test_typed_helpers(self) -> None:
        """get_object and get_array fall back on type mismatch."""
        reader = _reader()
        assert reader.get_array("frontDesk.bookingSlots")[0]["id"] == "name"
        assert reader.get_object("frontDesk.aiName") == {}
        assert reader.get_array("frontDesk.aiName", ["d"]) == ["d"]

    def test_get_many(self) -> None:
        """Several paths resolve in one call."""
        values = _reader().get_many(["frontDesk.aiName", "frontDesk.bookingEnabled"])
        assert values == {"frontDesk.aiName": "Ava", "frontDesk.bookingEnabled": True}

    def test_set_reader_id_chains(self) -> None:
        """Setters return the reader."""
        reader = _reader()
        assert reader.set_reader_id("Booking").set_turn(3) is reader
        assert reader.reader_id == "Booking"

    def test_missing_record(self) -> None:
        """A reader without a record resolves defaults."""
        reader = ConfigReader(
            call_id="c",
            tenant_id="t",
            tenant_record=None,
            settings=Settings(environment="development"),
        )
        assert reader.get("frontDesk.bookingEnabled") is True


class TestTraceEvents:
    """Tests for emitted trace events."""

    async def test_config_read_event(
        self, emitter: TraceEmitter, trace_sink: InMemoryTraceSink
    ) -> None:
        """Reads emit CONFIG_READ with correlation keys."""
        reader = _reader(emitter=emitter, reader_id="Greeter")
        reader.read("frontDesk.aiName")
        await emitter.flush()
        (event,) = trace_sink.events
        assert event.event_type == TraceEventType.CONFIG_READ
        assert event.call_id == "call-1"
        assert event.tenant_id == TENANT_ID
        assert event.data["resolved_from"] == "tenantRecord"
        assert event.reader_id == "Greeter"

    async def test_legacy_and_violation_events(
        self, emitter: TraceEmitter, trace_sink: InMemoryTraceSink
    ) -> None:
        """Bridge use and violations each emit their own event."""
        reader = _reader(legacy_consent_tenant(), emitter=emitter, enforcement_mode="warn")
        reader.read("frontDesk.discoveryConsent.consentPhrases")
        reader.read("nope.nothing")
        await emitter.flush()
        types = [e.event_type for e in trace_sink.events]
        assert types == [
            TraceEventType.LEGACY_PATH_USED,
            TraceEventType.CONFIG_READ,
            TraceEventType.AW_VIOLATION,
            TraceEventType.CONFIG_READ,
        ]

    async def test_default_emitter_used(self, trace_sink: InMemoryTraceSink) -> None:
        """Readers without an emitter fall back to the process default."""
        emitter = TraceEmitter(trace_sink)
        set_default_emitter(emitter)
        assert get_default_emitter() is emitter
        _reader().read("frontDesk.aiName")
        await emitter.flush()
        assert len(trace_sink.events) == 1

    async def test_config_hash_stable_within_call(
        self, emitter: TraceEmitter, trace_sink: InMemoryTraceSink
    ) -> None:
        """Every event of a call shares the config hash and trace run id."""
        reader = _reader(emitter=emitter)
        reader.read("frontDesk.aiName")
        reader.set_turn(1).read("frontDesk.bookingEnabled")
        await emitter.flush()
        first, second = trace_sink.events
        assert first.config_hash == second.config_hash
        assert first.trace_run_id == second.trace_run_id
        assert second.turn == 1


class TestSummaries:
    """Tests for turn and call summaries."""

    def test_reads_summary(self) -> None:
        """Counts by path and reader."""
        reader = _reader(legacy_consent_tenant(), enforcement_mode="warn")
        reader.read("frontDesk.aiName")
        reader.read("frontDesk.aiName")
        reader.read("frontDesk.discoveryConsent.consentPhrases")
        reader.read("bogus")
        summary = reader.reads_summary()
        assert summary["total_reads"] == 4
        assert summary["unique_paths"] == 3
        assert summary["path_counts"]["frontDesk.aiName"] == 2
        assert summary["violations"] == 1
        assert summary["legacy_reads"] == 1

    def test_turn_summary_scoped_to_turn(self) -> None:
        """The turn summary counts only reads of the current turn."""
        reader = _reader(reader_id="A")
        reader.read("frontDesk.aiName")
        reader.set_turn(1).set_reader_id("B")
        reader.read("frontDesk.bookingEnabled")
        event = reader.emit_summary()
        assert event.event_type == TraceEventType.AW_TURN_SUMMARY
        assert event.data["total_reads"] == 1
        assert event.data["top_readers"] == [{"key": "B", "count": 1}]
        assert event.data["enforcement_mode"] == "throw"

    def test_call_summary(self) -> None:
        """The call summary lists unread wired paths and unregistered reads."""
        reader = _reader(enforcement_mode="warn")
        reader.read("frontDesk.aiName")
        reader.read("frontDesk.bookingSlots.0.question")
        reader.read("llm0Controls.spamFilter.enabled")
        event = reader.emit_call_summary()
        data = event.data
        assert event.event_type == TraceEventType.AW_CALL_SUMMARY
        assert data["total_reads"] == 3
        assert data["read_but_unwired"] == ["llm0Controls.spamFilter.enabled"]
        assert data["violation_count"] == 0
        assert "frontDesk.aiName" not in data["unread_but_wired"]
        assert data["unread_but_wired_count"] >= len(data["unread_but_wired"])
        assert len(data["top_paths"]) <= 15


class TestModuleHelpers:
    """Tests for module-level helpers."""

    def test_is_registered(self, catalog: WiringCatalog) -> None:
        """Registry fields and their sub-paths count; dead reads do not."""
        assert is_registered("frontDesk.aiName", catalog)
        assert is_registered("frontDesk.bookingSlots.1.question", catalog)
        assert not is_registered("frontDesk.connectionQualityGate", catalog)

    def test_registered_paths_sorted(self) -> None:
        """Paths come back sorted."""
        paths = registered_paths()
        assert paths == sorted(paths)
        assert "dataConfig.templateReferences" in paths

    def test_quick_read_never_raises(self, emitter: TraceEmitter) -> None:
        """quick_read warns instead of throwing and emits nothing."""
        set_default_emitter(emitter)
        assert quick_read(wired_tenant(), "not.declared", "d") == "d"
        assert quick_read(wired_tenant(), "frontDesk.aiName") == "Ava"
        assert emitter.pending == 0
