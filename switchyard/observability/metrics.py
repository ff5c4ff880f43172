"""Prometheus metrics for Switchyard.

Tracks config reads and their provenance, enforcement violations, legacy
path usage, trace pipeline health, report generation and remediations.
"""

from prometheus_client import Counter, Histogram

# Config reader metrics
CONFIG_READS = Counter(
    "switchyard_config_reads_total",
    "Total config reads through the reader",
    labelnames=["resolved_from"],
)

REGISTRY_VIOLATIONS = Counter(
    "switchyard_registry_violations_total",
    "Reads of paths not declared in the registry",
    labelnames=["enforcement_mode"],
)

LEGACY_PATH_READS = Counter(
    "switchyard_legacy_path_reads_total",
    "Reads satisfied by a legacy bridge",
    labelnames=["path"],
)

# Trace pipeline metrics
TRACE_EVENTS_EMITTED = Counter(
    "switchyard_trace_events_emitted_total",
    "Trace events accepted for delivery",
    labelnames=["event_type"],
)

TRACE_EVENTS_DROPPED = Counter(
    "switchyard_trace_events_dropped_total",
    "Trace events dropped because the queue was full",
    labelnames=["event_type"],
)

TRACE_SINK_FAILURES = Counter(
    "switchyard_trace_sink_failures_total",
    "Trace events the sink failed to append",
)

# Report metrics
REPORT_LATENCY = Histogram(
    "switchyard_report_generation_seconds",
    "Wiring report generation time in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

REPORTS_GENERATED = Counter(
    "switchyard_reports_generated_total",
    "Wiring reports generated",
    labelnames=["health"],
)

TENANT_SAFETY_VERDICTS = Counter(
    "switchyard_tenant_safety_verdicts_total",
    "Tenant-safety proof verdicts",
    labelnames=["verdict"],
)

# Remediation metrics
REMEDIATIONS_APPLIED = Counter(
    "switchyard_remediations_applied_total",
    "Tier remediations written to tenant records",
    labelnames=["tier", "mode"],
)
