"""
Usage telemetry for remote model calls.

Every remote-call wrapper records one UsageLogEntry per invocation. Entries
are written to the session event log under the reserved ``api_usage`` type,
always in a detached task, and telemetry never raises into its caller.

The acting user is attributed through a context variable, so providers need
not thread ``user_id`` through every call:

    with telemetry_user("user-1"):
        await chat.generate("...")  # usage row carries user_id="user-1"

Context variables are copied into tasks at creation, so detached work
spawned inside the block keeps the attribution.

Aggregation (``UsageTelemetry.report`` / ``summarize_usage``) is a separate
read path that groups the log client-side.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from creative_recall.types.events import (
    AI_EVENT_TYPES,
    DailyCount,
    SessionEvent,
    SessionEventType,
    UsageLogEntry,
    UsageReport,
)

if TYPE_CHECKING:
    from creative_recall.storage.base import MemoryStore
    from creative_recall.utils.background import BackgroundTasks

logger = logging.getLogger(__name__)

USAGE_EVENT_TYPE = SessionEventType.API_USAGE

_USER: ContextVar[str | None] = ContextVar("creative_recall_telemetry_user", default=None)


@contextmanager
def telemetry_user(user_id: str | None) -> Iterator[None]:
    """
    Attribute usage recorded inside the block to ``user_id``.

    ``None`` keeps the current attribution.
    """
    if user_id is None:
        yield
        return
    token = _USER.set(user_id)
    try:
        yield
    finally:
        _USER.reset(token)


def current_user() -> str | None:
    """Return the user currently attributed for telemetry."""
    return _USER.get()


class UsageTelemetry:
    """
    Records one usage row per remote model call.

    Args:
        store: Session event log
        background: Scheduler for the detached inserts
    """

    def __init__(self, store: "MemoryStore", background: "BackgroundTasks") -> None:
        self._store = store
        self._background = background

    def record(
        self,
        function_name: str,
        model: str,
        *,
        user_id: str | None = None,
        token_estimate: int | None = None,
        cached: bool = False,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Schedule an insert of one usage row. Returns immediately; never raises.

        Args:
            function_name: Calling operation
            model: Model name
            user_id: Attributed user (defaults to the telemetry_user context)
            token_estimate: Estimated input tokens
            cached: Whether the result was served from a cache
            duration_ms: Wall-clock duration of the remote call
            metadata: Extra values stored alongside the entry
        """
        try:
            entry = UsageLogEntry(
                function_name=function_name,
                user_id=user_id if user_id is not None else current_user(),
                model=model,
                token_estimate=token_estimate,
                cached=cached,
                duration_ms=duration_ms,
                metadata=metadata or {},
            )
            self._background.spawn(self._insert(entry), name=f"usage:{function_name}")
        except Exception as e:
            logger.error(f"[usage] could not record {function_name}: {e}")

    async def _insert(self, entry: UsageLogEntry) -> None:
        try:
            await self._store.insert_session_event(entry.to_session_event())
        except Exception as e:
            logger.error(f"[usage] insert failed for {entry.function_name}: {e}")

    async def report(
        self,
        days: int = 7,
        *,
        user_id: str | None = None,
        max_days: int = 90,
        row_limit: int = 5000,
    ) -> UsageReport:
        """
        Aggregate AI usage over the last ``days`` days.

        Args:
            days: Lookback window, clamped to 1..max_days
            user_id: Restrict to one user
            max_days: Upper bound for the window
            row_limit: Maximum rows scanned (newest first)

        Returns:
            UsageReport grouped by event type, function, user and day
        """
        days = min(max(days, 1), max_days)
        since = datetime.now(timezone.utc) - timedelta(days=days)

        events = await self._store.list_session_events(
            event_types=list(AI_EVENT_TYPES),
            user_id=user_id,
            since=since,
            limit=row_limit,
        )
        embeddings_total = await self._store.count_embeddings()

        return summarize_usage(
            events,
            days=days,
            since=since,
            embeddings_total=embeddings_total,
        )


def summarize_usage(
    events: Iterable[SessionEvent],
    *,
    days: int,
    since: datetime,
    embeddings_total: int = 0,
) -> UsageReport:
    """Group session events by event type, function name, user and UTC day."""
    by_event_type: dict[str, int] = {}
    by_function: dict[str, int] = {}
    by_user: dict[str, int] = {}
    by_day: dict[str, int] = {}
    total = 0

    for event in events:
        total += 1
        event_type = event.event_type.value
        by_event_type[event_type] = by_event_type.get(event_type, 0) + 1

        if event.event_type is USAGE_EVENT_TYPE:
            fn = event.metadata.get("function_name") or "unknown"
            by_function[str(fn)] = by_function.get(str(fn), 0) + 1

        if event.user_id:
            by_user[event.user_id] = by_user.get(event.user_id, 0) + 1

        day = event.created_at.astimezone(timezone.utc).date().isoformat()
        by_day[day] = by_day.get(day, 0) + 1

    return UsageReport(
        days=days,
        since=since,
        total_events=total,
        by_event_type=by_event_type,
        by_function=by_function,
        by_user=by_user,
        daily_trend=[DailyCount(date=d, count=c) for d, c in sorted(by_day.items())],
        embeddings_total=embeddings_total,
    )
