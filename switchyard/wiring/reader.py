"""The config reader: the single entry point for runtime config reads.

One ``ConfigReader`` is created per call. Every read:

1. checks the path against the registry (unless enforcement is ``off``)
2. resolves it through the ``PathResolver``
3. records it in the call's read log
4. emits a CONFIG_READ trace event

Enforcement mode precedence: explicit argument > tenant setting
(``aiAgentSettings.infra.aw.enforcementMode``) > process override >
``wiring.enforcement_mode`` setting > environment default (``warn`` in
production environments, ``throw`` elsewhere).
"""

from collections import Counter
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from switchyard.config import get_settings
from switchyard.config.settings import Settings
from switchyard.observability.logging import get_logger
from switchyard.observability.metrics import (
    CONFIG_READS,
    LEGACY_PATH_READS,
    REGISTRY_VIOLATIONS,
)
from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.models import (
    CorrelationKeys,
    TraceEvent,
    TraceEventType,
    new_trace_run_id,
    utc_now,
)
from switchyard.wiring.catalog import WiringCatalog, get_catalog, parent_paths
from switchyard.wiring.exceptions import RegistryViolationError
from switchyard.wiring.models.bridges import LegacyBridge
from switchyard.wiring.models.enums import EnforcementMode, Provenance
from switchyard.wiring.paths import config_hash, get_path, hash_value, value_preview
from switchyard.wiring.resolver import PathResolver, Resolution

logger = get_logger(__name__)

TENANT_ENFORCEMENT_PATH = "aiAgentSettings.infra.aw.enforcementMode"
TENANT_ALLOWLIST_PATH = "aiAgentSettings.infra.strictConfigRegistry.allowlist"
TENANT_BLOCK_DEAD_READS_PATH = "aiAgentSettings.infra.strictConfigRegistry.blockDeadReads"

_process_enforcement_mode: EnforcementMode | None = None
_default_emitter: TraceEmitter | None = None


def set_process_enforcement_mode(mode: EnforcementMode | str | None) -> None:
    """Override the enforcement mode for every reader in this process.

    Pass None to fall back to configuration.
    """
    global _process_enforcement_mode
    _process_enforcement_mode = EnforcementMode(mode) if mode is not None else None
    logger.info(
        "process_enforcement_mode_set",
        enforcement_mode=_process_enforcement_mode.value if _process_enforcement_mode else None,
    )


def get_process_enforcement_mode() -> EnforcementMode | None:
    return _process_enforcement_mode


def set_default_emitter(emitter: TraceEmitter | None) -> None:
    """Emitter used by readers that are not given one explicitly."""
    global _default_emitter
    _default_emitter = emitter


def get_default_emitter() -> TraceEmitter | None:
    return _default_emitter


def configured_enforcement_mode(settings: Settings) -> EnforcementMode:
    """Process-wide mode: override, then settings, then environment default."""
    if _process_enforcement_mode is not None:
        return _process_enforcement_mode
    if settings.wiring.enforcement_mode is not None:
        return EnforcementMode(settings.wiring.enforcement_mode)
    if settings.environment in settings.wiring.production_environments:
        return EnforcementMode.WARN
    return EnforcementMode.THROW


def _tenant_enforcement_mode(record: dict[str, Any], tenant_id: str) -> EnforcementMode | None:
    raw = get_path(record, TENANT_ENFORCEMENT_PATH)
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return EnforcementMode(raw)
    except ValueError:
        logger.warning(
            "tenant_enforcement_mode_invalid",
            tenant_id=tenant_id,
            value=raw,
            allowed=[m.value for m in EnforcementMode],
        )
        return None


class ReadRecord(BaseModel):
    """One entry of a call's read log."""

    path: str
    reader_id: str
    resolved_from: Provenance
    value_hash: str
    value_preview: str
    turn: int = 0
    legacy_path: str | None = None


class ViolationRecord(BaseModel):
    """A read of a path the registry does not allow."""

    path: str
    reader_id: str
    enforcement_mode: EnforcementMode
    reason: str = Field(..., description="unregistered or dead_read")
    turn: int = 0


class ConfigReader:
    """Per-call config reader with enforcement and read provenance.

    A reader is driven by a single caller; it is not safe to share one
    reader across concurrent calls.
    """

    def __init__(
        self,
        *,
        call_id: str,
        tenant_id: str,
        tenant_record: dict[str, Any] | None,
        reader_id: str = "unknown",
        turn: int = 0,
        enforcement_mode: EnforcementMode | str | None = None,
        catalog: WiringCatalog | None = None,
        emitter: TraceEmitter | None = None,
        settings: Settings | None = None,
        emit_events: bool = True,
    ) -> None:
        self._settings = settings or get_settings()
        self._catalog = catalog or get_catalog()
        self._resolver = PathResolver(self._catalog)
        self._record = tenant_record or {}
        self._call_id = call_id
        self._tenant_id = tenant_id
        self._reader_id = reader_id
        self._turn = turn
        self._emitter = (emitter or _default_emitter) if emit_events else None
        self._config_hash = config_hash(self._record)
        self._trace_run_id = new_trace_run_id()
        self._reads: list[ReadRecord] = []
        self._violations: list[ViolationRecord] = []
        self._started_at = utc_now()

        if enforcement_mode is not None:
            self._enforcement_mode = EnforcementMode(enforcement_mode)
        else:
            self._enforcement_mode = _tenant_enforcement_mode(
                self._record, tenant_id
            ) or configured_enforcement_mode(self._settings)

        allowlist = get_path(self._record, TENANT_ALLOWLIST_PATH)
        self._allowlist = frozenset(
            p for p in (allowlist if isinstance(allowlist, list) else []) if isinstance(p, str)
        )
        self._block_dead_reads = get_path(self._record, TENANT_BLOCK_DEAD_READS_PATH) is True

    @classmethod
    def for_call(
        cls,
        *,
        call_id: str,
        tenant_id: str,
        tenant_record: dict[str, Any] | None,
        reader_id: str = "unknown",
        turn: int = 0,
        enforcement_mode: EnforcementMode | str | None = None,
        catalog: WiringCatalog | None = None,
        emitter: TraceEmitter | None = None,
        settings: Settings | None = None,
    ) -> "ConfigReader":
        """Create the reader for one call."""
        return cls(
            call_id=call_id,
            tenant_id=tenant_id,
            tenant_record=tenant_record,
            reader_id=reader_id,
            turn=turn,
            enforcement_mode=enforcement_mode,
            catalog=catalog,
            emitter=emitter,
            settings=settings,
        )

    # --- properties --------------------------------------------------------

    @property
    def call_id(self) -> str:
        return self._call_id

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def reader_id(self) -> str:
        return self._reader_id

    @property
    def enforcement_mode(self) -> EnforcementMode:
        return self._enforcement_mode

    @property
    def catalog(self) -> WiringCatalog:
        return self._catalog

    @property
    def tenant_record(self) -> dict[str, Any]:
        return self._record

    @property
    def reads(self) -> list[ReadRecord]:
        return list(self._reads)

    @property
    def violations(self) -> list[ViolationRecord]:
        return list(self._violations)

    def correlation_keys(self) -> CorrelationKeys:
        return CorrelationKeys(
            call_id=self._call_id,
            tenant_id=self._tenant_id,
            turn=self._turn,
            config_hash=self._config_hash,
            trace_run_id=self._trace_run_id,
        )

    # --- chainable setters -------------------------------------------------

    def set_turn(self, turn: int) -> "ConfigReader":
        self._turn = turn
        return self

    def set_reader_id(self, reader_id: str) -> "ConfigReader":
        self._reader_id = reader_id
        return self

    # --- reads -------------------------------------------------------------

    def read(self, path: str) -> Resolution:
        """Resolve a path with full provenance.

        Raises:
            RegistryViolationError: If the path is not allowed and enforcement is ``throw``
        """
        self._check_registry(path)

        try:
            resolution = self._resolver.resolve(path, self._record, on_legacy=self._on_legacy)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "config_resolve_failed",
                path=path,
                reader_id=self._reader_id,
                call_id=self._call_id,
                error=str(e),
            )
            resolution = Resolution(path=path, resolved_from=Provenance.ABSENT)

        record = ReadRecord(
            path=path,
            reader_id=self._reader_id,
            resolved_from=resolution.resolved_from,
            value_hash=hash_value(resolution.value),
            value_preview=value_preview(resolution.value),
            turn=self._turn,
            legacy_path=resolution.legacy_path,
        )
        self._reads.append(record)
        CONFIG_READS.labels(resolved_from=resolution.resolved_from.value).inc()
        self.emit(
            TraceEventType.CONFIG_READ,
            {
                "path": path,
                "reader_id": record.reader_id,
                "resolved_from": record.resolved_from.value,
                "value_hash": record.value_hash,
                "value_preview": record.value_preview,
                "storage_path": resolution.storage_path,
            },
        )
        return resolution

    def get(self, path: str, default: Any = None) -> Any:
        """Effective value of a path; ``default`` only when nothing resolves."""
        resolution = self.read(path)
        if resolution.is_absent:
            return default
        return resolution.value

    def get_many(self, paths: Iterable[str]) -> dict[str, Any]:
        return {path: self.get(path) for path in paths}

    def is_enabled(self, path: str) -> bool:
        return self.get(path) is True

    def is_disabled(self, path: str) -> bool:
        return self.get(path) is False

    def get_object(self, path: str, default: dict[str, Any] | None = None) -> dict[str, Any]:
        value = self.get(path)
        if isinstance(value, dict):
            return value
        return default if default is not None else {}

    def get_array(self, path: str, default: list[Any] | None = None) -> list[Any]:
        value = self.get(path)
        if isinstance(value, list):
            return value
        return default if default is not None else []

    # --- summaries ---------------------------------------------------------

    def reads_summary(self) -> dict[str, Any]:
        """Aggregate view of the read log."""
        path_counts = Counter(r.path for r in self._reads)
        reader_counts = Counter(r.reader_id for r in self._reads)
        return {
            "total_reads": len(self._reads),
            "unique_paths": len(path_counts),
            "path_counts": dict(path_counts),
            "reader_counts": dict(reader_counts),
            "violations": len(self._violations),
            "violation_details": [v.model_dump(mode="json") for v in self._violations],
            "legacy_reads": sum(1 for r in self._reads if r.resolved_from == Provenance.LEGACY_BRIDGE),
        }

    def emit_summary(self) -> TraceEvent:
        """Emit the AW_TURN_SUMMARY for the current turn."""
        limits = self._settings.wiring.summary_limits
        turn_reads = [r for r in self._reads if r.turn == self._turn]
        turn_violations = [v for v in self._violations if v.turn == self._turn]
        data = {
            "total_reads": len(turn_reads),
            "unique_paths": len({r.path for r in turn_reads}),
            "top_readers": _top(Counter(r.reader_id for r in turn_reads), limits.turn_top_readers),
            "top_paths": _top(Counter(r.path for r in turn_reads), limits.turn_top_paths),
            "violation_count": len(turn_violations),
            "violations": sorted({v.path for v in turn_violations}),
            "legacy_reads": sum(
                1 for r in turn_reads if r.resolved_from == Provenance.LEGACY_BRIDGE
            ),
            "enforcement_mode": self._enforcement_mode.value,
        }
        return self.emit(TraceEventType.AW_TURN_SUMMARY, data)

    def emit_call_summary(self) -> TraceEvent:
        """Emit the AW_CALL_SUMMARY for the whole call.

        Besides the top readers and paths, the summary lists registry paths
        that runtime code consumes but were never read during the call, and
        read paths the registry does not declare.
        """
        limits = self._settings.wiring.summary_limits
        read_paths = {r.path for r in self._reads}
        touched = set(read_paths)
        for path in read_paths:
            touched.update(parent_paths(path))

        wired = [
            path
            for path in self._catalog.fields_by_id
            if self._catalog.has_runtime_reader(path)
        ]
        unread = [path for path in wired if path not in touched]
        unwired = sorted(path for path in read_paths if not is_registered(path, self._catalog))

        data = {
            "total_reads": len(self._reads),
            "unique_paths": len(read_paths),
            "turns": self._turn,
            "top_readers": _top(Counter(r.reader_id for r in self._reads), limits.call_top_readers),
            "top_paths": _top(Counter(r.path for r in self._reads), limits.call_top_paths),
            "unread_but_wired": unread[: limits.unread_but_wired],
            "unread_but_wired_count": len(unread),
            "read_but_unwired": unwired,
            "violation_count": len(self._violations),
            "violations": sorted({v.path for v in self._violations}),
            "legacy_reads": sum(
                1 for r in self._reads if r.resolved_from == Provenance.LEGACY_BRIDGE
            ),
            "enforcement_mode": self._enforcement_mode.value,
            "duration_ms": int((utc_now() - self._started_at).total_seconds() * 1000),
        }
        return self.emit(TraceEventType.AW_CALL_SUMMARY, data)

    # --- internals ---------------------------------------------------------

    def _check_registry(self, path: str) -> None:
        if self._enforcement_mode == EnforcementMode.OFF:
            return

        reason: str | None = None
        if not self._catalog.is_known(path, self._allowlist):
            reason = "unregistered"
        elif (
            self._block_dead_reads
            and path not in self._allowlist
            and self._catalog.is_dead_read(path)
        ):
            reason = "dead_read"
        if reason is None:
            return

        violation = ViolationRecord(
            path=path,
            reader_id=self._reader_id,
            enforcement_mode=self._enforcement_mode,
            reason=reason,
            turn=self._turn,
        )
        self._violations.append(violation)
        REGISTRY_VIOLATIONS.labels(enforcement_mode=self._enforcement_mode.value).inc()
        self.emit(
            TraceEventType.AW_VIOLATION,
            {
                "path": path,
                "reader_id": self._reader_id,
                "reason": reason,
                "enforcement_mode": self._enforcement_mode.value,
            },
        )
        logger.warning(
            "config_read_violation",
            path=path,
            reader_id=self._reader_id,
            reason=reason,
            enforcement_mode=self._enforcement_mode.value,
            call_id=self._call_id,
            tenant_id=self._tenant_id,
        )
        if self._enforcement_mode == EnforcementMode.THROW:
            raise RegistryViolationError(path, self._reader_id, self._enforcement_mode.value)

    def _on_legacy(self, bridge: LegacyBridge, value: Any) -> None:
        LEGACY_PATH_READS.labels(path=bridge.path).inc()
        logger.info(
            "legacy_path_used",
            path=bridge.path,
            legacy_path=bridge.legacy_storage_path,
            reader_id=self._reader_id,
            call_id=self._call_id,
            tenant_id=self._tenant_id,
        )
        self.emit(
            TraceEventType.LEGACY_PATH_USED,
            {
                "path": bridge.path,
                "legacy_path": bridge.legacy_storage_path,
                "reader_id": self._reader_id,
                "value_preview": value_preview(value),
                "migration_note": bridge.migration_note,
            },
        )

    def emit(self, event_type: TraceEventType, data: dict[str, Any]) -> TraceEvent:
        """Stamp an event with this call's correlation keys and queue it."""
        event = TraceEvent.create(event_type, self.correlation_keys(), data, self._reader_id)
        if self._emitter is not None:
            self._emitter.emit(event)
        return event


def _top(counts: Counter[str], limit: int) -> list[dict[str, Any]]:
    return [{"key": key, "count": count} for key, count in counts.most_common(limit)]


def is_registered(path: str, catalog: WiringCatalog | None = None) -> bool:
    """Whether a path, or one of its dotted parents, is a registry field."""
    catalog = catalog or get_catalog()
    if path in catalog.registered_paths:
        return True
    return any(parent in catalog.registered_paths for parent in parent_paths(path))


def registered_paths(catalog: WiringCatalog | None = None) -> list[str]:
    """Every registry field id, sorted."""
    catalog = catalog or get_catalog()
    return sorted(catalog.registered_paths)


def quick_read(
    tenant_record: dict[str, Any] | None,
    path: str,
    default: Any = None,
    *,
    catalog: WiringCatalog | None = None,
) -> Any:
    """One-off system read outside any call.

    Enforcement is forced to ``warn`` and no trace events are emitted.
    """
    reader = ConfigReader(
        call_id="system",
        tenant_id=str((tenant_record or {}).get("_id", "system")),
        tenant_record=tenant_record,
        reader_id="quick_read",
        enforcement_mode=EnforcementMode.WARN,
        catalog=catalog,
        emit_events=False,
    )
    return reader.get(path, default)
