"""Trace sinks."""

from switchyard.trace.store import TraceSink
from switchyard.trace.stores.inmemory import InMemoryTraceSink

__all__ = [
    "InMemoryTraceSink",
    "TraceSink",
]
