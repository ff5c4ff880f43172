"""TraceSink abstract interface."""

from abc import ABC, abstractmethod

from switchyard.trace.models import TraceEvent, TraceEventType


class TraceSink(ABC):
    """Abstract append-only destination for trace events.

    Implementations may be slow or unavailable; callers never invoke them
    directly but go through the TraceEmitter, which isolates failures.
    """

    @abstractmethod
    async def append(self, event: TraceEvent) -> None:
        """Append one event."""
        pass

    @abstractmethod
    async def list_events(
        self,
        call_id: str,
        *,
        event_type: TraceEventType | None = None,
        limit: int = 1000,
    ) -> list[TraceEvent]:
        """List events for a call in emission order."""
        pass
