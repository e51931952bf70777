"""
Session Event Types

Storage Models:
    - SessionEvent: Append-only record of a notable action
    - UsageLogEntry: One remote model call, stored as a SessionEvent of the
      reserved ``api_usage`` type

Reporting Models:
    - DailyCount, UsageReport: Client-side aggregation of the event log
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from creative_recall.types.entities import EntityType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionEventType(str, Enum):
    """Kinds of session events."""

    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    TASK_COMPLETED = "task_completed"
    NOTE_CAPTURED = "note_captured"
    COLLABORATOR_FEEDBACK = "collaborator_feedback"
    MILESTONE_REACHED = "milestone_reached"
    PROJECT_STATUS_CHANGED = "project_status_changed"
    CREATIVE_BLOCK_INTERVENTION = "creative_block_intervention"
    CREATIVE_BLOCK_FEEDBACK = "creative_block_feedback"
    INSIGHT_FLAGGED = "insight_flagged"
    API_USAGE = "api_usage"  # Reserved for usage telemetry rows

    def __str__(self) -> str:
        return self.value


# Event types counted by the usage report.
AI_EVENT_TYPES: tuple[SessionEventType, ...] = (
    SessionEventType.API_USAGE,
    SessionEventType.CREATIVE_BLOCK_INTERVENTION,
    SessionEventType.CREATIVE_BLOCK_FEEDBACK,
    SessionEventType.INSIGHT_FLAGGED,
)


class SessionEvent(BaseModel):
    """
    An append-only session log row.

    Rows are never updated or deleted. An embedding may later be attached
    out-of-band as an EmbeddingRecord keyed to ``("session_event", id)``.

    Attributes:
        id: Assigned by the store on insert
        user_id: Acting user (None for system rows such as usage telemetry)
        event_type: Kind of event
        content: Human-readable description, used as embedding input
        project_id: Optional owning project
        entity_type: Optional related entity variant
        entity_id: Optional related entity identifier
        metadata: Free-form JSON-serializable metadata
        created_at: Insert time (UTC)
    """

    id: str | None = None
    user_id: str | None = None
    event_type: SessionEventType
    content: str
    project_id: str | None = None
    entity_type: EntityType | None = None
    entity_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class UsageLogEntry(BaseModel):
    """
    One remote model invocation.

    Attributes:
        function_name: Calling operation (e.g. "generate_embedding")
        user_id: Attributed user, if known
        model: Model name
        token_estimate: Estimated input tokens
        cached: Whether the result came from a cache
        duration_ms: Wall-clock time of the remote call
        timestamp: When the call finished (UTC)
        metadata: Extra values (estimated cost, output tokens, ...)
    """

    function_name: str = Field(..., min_length=1)
    user_id: str | None = None
    model: str
    token_estimate: int | None = None
    cached: bool = False
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_session_event(self) -> SessionEvent:
        """Render as a reserved-type session event."""
        metadata: dict[str, Any] = {
            **self.metadata,
            "function_name": self.function_name,
            "model": self.model,
            "input_tokens_estimate": self.token_estimate,
            "cached": self.cached,
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp.isoformat(),
        }
        return SessionEvent(
            user_id=self.user_id,
            event_type=SessionEventType.API_USAGE,
            content=f"AI API call: {self.function_name} ({self.model})",
            metadata=metadata,
            created_at=self.timestamp,
        )


class DailyCount(BaseModel):
    """Event count for one UTC day."""

    date: str
    count: int


class UsageReport(BaseModel):
    """
    Aggregated AI usage over a lookback window.

    Attributes:
        days: Window length in days
        since: Window start (UTC)
        total_events: Rows in the window
        by_event_type: Counts per event type
        by_function: Counts per function name (api_usage rows only)
        by_user: Counts per user id
        daily_trend: Counts per UTC day, ascending
        embeddings_total: Stored embedding records
    """

    days: int
    since: datetime
    total_events: int = 0
    by_event_type: dict[str, int] = Field(default_factory=dict)
    by_function: dict[str, int] = Field(default_factory=dict)
    by_user: dict[str, int] = Field(default_factory=dict)
    daily_trend: list[DailyCount] = Field(default_factory=list)
    embeddings_total: int = 0
