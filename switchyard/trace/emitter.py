"""Non-blocking trace event emission.

The config reader runs inside a live call; it must never wait on, or fail
because of, the trace sink. ``TraceEmitter.emit`` only enqueues onto a
bounded queue. A background worker drains the queue into the sink and
absorbs sink errors, so a sink outage costs observability, not availability.
"""

import asyncio

from switchyard.observability.logging import get_logger
from switchyard.observability.metrics import (
    TRACE_EVENTS_DROPPED,
    TRACE_EVENTS_EMITTED,
    TRACE_SINK_FAILURES,
)
from switchyard.trace.models import TraceEvent
from switchyard.trace.store import TraceSink

logger = get_logger(__name__)


class TraceEmitter:
    """Bounded queue between event producers and a TraceSink."""

    def __init__(
        self,
        sink: TraceSink,
        *,
        max_queue_size: int = 10_000,
        enabled: bool = True,
    ) -> None:
        self._sink = sink
        self._enabled = enabled
        self._queue: asyncio.Queue[TraceEvent] = asyncio.Queue(maxsize=max_queue_size)
        self._worker_task: asyncio.Task[None] | None = None
        self._dropped = 0

    @property
    def sink(self) -> TraceSink:
        return self._sink

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending(self) -> int:
        """Events waiting for delivery."""
        return self._queue.qsize()

    @property
    def dropped(self) -> int:
        """Events discarded because the queue was full."""
        return self._dropped

    def emit(self, event: TraceEvent) -> bool:
        """Queue an event for delivery without blocking.

        Returns:
            True if the event was queued, False if it was discarded
        """
        if not self._enabled:
            return False

        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            TRACE_EVENTS_DROPPED.labels(event_type=event.event_type.value).inc()
            logger.warning(
                "trace_event_dropped",
                event_type=event.event_type.value,
                call_id=event.call_id,
                dropped_total=self._dropped,
            )
            return False

        TRACE_EVENTS_EMITTED.labels(event_type=event.event_type.value).inc()
        self._ensure_worker()
        return True

    async def start(self) -> None:
        """Start the background drain worker."""
        self._ensure_worker()

    async def flush(self) -> None:
        """Wait until every queued event has been handed to the sink."""
        if self._worker_task is not None and not self._worker_task.done():
            await self._queue.join()
            return

        while not self._queue.empty():
            event = self._queue.get_nowait()
            try:
                await self._deliver(event)
            finally:
                self._queue.task_done()

    async def aclose(self) -> None:
        """Flush pending events and stop the worker."""
        await self.flush()
        if self._worker_task is not None:
            self._worker_task.cancel()
            try:
                await self._worker_task
            except asyncio.CancelledError:
                pass
            self._worker_task = None

    def _ensure_worker(self) -> None:
        if self._worker_task is not None and not self._worker_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: events stay queued until start() or flush()
            return
        self._worker_task = loop.create_task(self._worker())

    async def _worker(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._deliver(event)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: TraceEvent) -> None:
        try:
            await self._sink.append(event)
        except Exception as e:  # noqa: BLE001
            TRACE_SINK_FAILURES.inc()
            logger.warning(
                "trace_sink_append_failed",
                event_type=event.event_type.value,
                call_id=event.call_id,
                error=str(e),
                error_type=type(e).__name__,
            )
