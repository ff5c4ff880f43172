"""Trace events: models, sinks, and the non-blocking emitter."""

from switchyard.trace.emitter import TraceEmitter
from switchyard.trace.models import (
    CorrelationKeys,
    TraceEvent,
    TraceEventType,
    new_trace_run_id,
)
from switchyard.trace.store import TraceSink
from switchyard.trace.stores.inmemory import InMemoryTraceSink

__all__ = [
    "CorrelationKeys",
    "InMemoryTraceSink",
    "TraceEmitter",
    "TraceEvent",
    "TraceEventType",
    "TraceSink",
    "new_trace_run_id",
]
