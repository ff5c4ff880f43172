"""Trace event models for the wiring engine.

Every event carries the same correlation keys so that the reads, violations
and summaries of one call can be joined in the external sink.
"""

import secrets
import time
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_trace_run_id() -> str:
    """Generate a trace-run id of the form ``tr-<epoch_ms>-<random>``."""
    return f"tr-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


class TraceEventType(str, Enum):
    """Kinds of events the engine appends to the trace sink."""

    CONFIG_READ = "CONFIG_READ"
    AW_VIOLATION = "AW_VIOLATION"
    LEGACY_PATH_USED = "LEGACY_PATH_USED"
    AW_TURN_SUMMARY = "AW_TURN_SUMMARY"
    AW_CALL_SUMMARY = "AW_CALL_SUMMARY"
    BOOKING_CONFIG_RESOLVED = "BOOKING_CONFIG_RESOLVED"


class CorrelationKeys(BaseModel):
    """Identity shared by all events of one call."""

    model_config = ConfigDict(frozen=True)

    call_id: str = Field(..., description="Call the event belongs to")
    tenant_id: str = Field(..., description="Owning tenant")
    turn: int = Field(default=0, ge=0, description="Turn counter at emission time")
    config_hash: str | None = Field(
        default=None, description="Hash of the tenant's effective agent settings"
    )
    trace_run_id: str = Field(
        default_factory=new_trace_run_id, description="Run identifier for joining events"
    )


class TraceEvent(BaseModel):
    """A single append-only trace event."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    event_type: TraceEventType = Field(..., description="Event classification")
    call_id: str = Field(..., description="Call the event belongs to")
    tenant_id: str = Field(..., description="Owning tenant")
    turn: int = Field(default=0, ge=0, description="Turn counter")
    config_hash: str | None = Field(default=None, description="Effective config hash")
    trace_run_id: str = Field(..., description="Trace run identifier")
    reader_id: str | None = Field(default=None, description="Component that caused the event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event payload")
    timestamp: datetime = Field(default_factory=utc_now, description="Event time")

    @classmethod
    def create(
        cls,
        event_type: TraceEventType,
        keys: CorrelationKeys,
        data: dict[str, Any],
        reader_id: str | None = None,
    ) -> "TraceEvent":
        """Build an event stamped with the given correlation keys."""
        return cls(
            event_type=event_type,
            call_id=keys.call_id,
            tenant_id=keys.tenant_id,
            turn=keys.turn,
            config_hash=keys.config_hash,
            trace_run_id=keys.trace_run_id,
            reader_id=reader_id,
            data=data,
        )
