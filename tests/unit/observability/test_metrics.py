"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from switchyard.observability.metrics import (
    CONFIG_READS,
    LEGACY_PATH_READS,
    REGISTRY_VIOLATIONS,
    REPORT_LATENCY,
    REPORTS_GENERATED,
    TENANT_SAFETY_VERDICTS,
    TRACE_EVENTS_DROPPED,
    TRACE_EVENTS_EMITTED,
    TRACE_SINK_FAILURES,
)


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestConfigReadMetrics:
    """Tests for config reader counters."""

    def test_config_reads_by_provenance(self) -> None:
        """CONFIG_READS is labelled by resolution step."""
        before = _sample("switchyard_config_reads_total", {"resolved_from": "legacyBridge"})
        CONFIG_READS.labels(resolved_from="legacyBridge").inc()
        after = _sample("switchyard_config_reads_total", {"resolved_from": "legacyBridge"})
        assert after == before + 1

    def test_registry_violations_by_mode(self) -> None:
        """REGISTRY_VIOLATIONS is labelled by enforcement mode."""
        before = _sample("switchyard_registry_violations_total", {"enforcement_mode": "warn"})
        REGISTRY_VIOLATIONS.labels(enforcement_mode="warn").inc()
        after = _sample("switchyard_registry_violations_total", {"enforcement_mode": "warn"})
        assert after == before + 1

    def test_legacy_reads_by_path(self) -> None:
        """LEGACY_PATH_READS accepts a path label."""
        LEGACY_PATH_READS.labels(path="booking.addressVerification.enabled").inc()


class TestTraceMetrics:
    """Tests for trace pipeline metrics."""

    def test_emitted_and_dropped_exist(self) -> None:
        """Emitted and dropped counters share the event_type label."""
        TRACE_EVENTS_EMITTED.labels(event_type="CONFIG_READ").inc()
        TRACE_EVENTS_DROPPED.labels(event_type="CONFIG_READ").inc()

    def test_sink_failures_unlabelled(self) -> None:
        """TRACE_SINK_FAILURES has no labels."""
        before = _sample("switchyard_trace_sink_failures_total")
        TRACE_SINK_FAILURES.inc()
        assert _sample("switchyard_trace_sink_failures_total") == before + 1


class TestReportMetrics:
    """Tests for report metrics."""

    def test_latency_histogram_observe(self) -> None:
        """Should observe generation time."""
        REPORT_LATENCY.observe(0.042)

    def test_reports_generated_by_health(self) -> None:
        """REPORTS_GENERATED is labelled by overall health."""
        REPORTS_GENERATED.labels(health="GREEN").inc()

    def test_safety_verdicts(self) -> None:
        """TENANT_SAFETY_VERDICTS is labelled by verdict."""
        before = _sample("switchyard_tenant_safety_verdicts_total", {"verdict": "UNSAFE"})
        TENANT_SAFETY_VERDICTS.labels(verdict="UNSAFE").inc()
        after = _sample("switchyard_tenant_safety_verdicts_total", {"verdict": "UNSAFE"})
        assert after == before + 1
