"""In-memory implementation of TraceSink."""

from switchyard.trace.models import TraceEvent, TraceEventType
from switchyard.trace.store import TraceSink


class InMemoryTraceSink(TraceSink):
    """In-memory TraceSink for testing and development.

    Keeps events in a list in append order.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._events: list[TraceEvent] = []

    async def append(self, event: TraceEvent) -> None:
        self._events.append(event)

    async def list_events(
        self,
        call_id: str,
        *,
        event_type: TraceEventType | None = None,
        limit: int = 1000,
    ) -> list[TraceEvent]:
        results = [
            event for event in self._events
            if event.call_id == call_id
            and (event_type is None or event.event_type == event_type)
        ]
        return results[:limit]

    @property
    def events(self) -> list[TraceEvent]:
        """All events appended so far."""
        return list(self._events)

    def clear(self) -> None:
        """Remove all stored events."""
        self._events.clear()
