"""
DuckDB Query Layer

SQL reads over the session-event Parquet dataset.
"""

import asyncio
import json
import threading
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import duckdb

from creative_recall.types import EntityType, SessionEvent, SessionEventType

SESSION_EVENT_COLUMNS = (
    "id, user_id, event_type, content, project_id, "
    "entity_type, entity_id, metadata, created_at"
)


def format_timestamp(value: datetime) -> str:
    """
    Render a timestamp as fixed-width UTC text.

    Fixed width keeps string comparison and ordering chronological.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class SessionEventQueries:
    """
    DuckDB reads for the append-only session log.

    The log is a directory of immutable part files; every query reads the
    current set of parts, so new appends are visible without refreshing.

    Thread safety:
        Uses thread-local storage for connections since DuckDB connections
        are not thread-safe and asyncio.to_thread() may use different threads.
    """

    def __init__(self, dataset_path: Path):
        self.dataset_path = dataset_path
        self._local = threading.local()
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize DuckDB (marks as ready, connections created per-thread)."""
        self._initialized = True

    async def close(self) -> None:
        """Close DuckDB connections."""
        self._initialized = False
        conn = getattr(self._local, 'conn', None)
        if conn is not None:
            conn.close()
            self._local.conn = None

    def _get_conn(self) -> duckdb.DuckDBPyConnection:
        """Get thread-local DuckDB connection, creating if needed."""
        if not self._initialized:
            raise RuntimeError("DuckDB not initialized. Call initialize() first.")

        conn = getattr(self._local, 'conn', None)
        if conn is None:
            conn = duckdb.connect()
            self._local.conn = conn
        return conn

    def _has_parts(self) -> bool:
        return self.dataset_path.is_dir() and any(self.dataset_path.glob("*.parquet"))

    def _source(self) -> str:
        pattern = str(self.dataset_path / "*.parquet").replace("'", "''")
        return f"read_parquet('{pattern}')"

    @staticmethod
    def _where(
        event_types: Sequence[SessionEventType] | None,
        user_id: str | None,
        since: datetime | None = None,
        event_id: str | None = None,
    ) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        if event_types:
            placeholders = ", ".join("?" for _ in event_types)
            clauses.append(f"event_type IN ({placeholders})")
            params.extend(SessionEventType(t).value for t in event_types)
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if since is not None:
            clauses.append("created_at >= ?")
            params.append(format_timestamp(since))
        if event_id is not None:
            clauses.append("id = ?")
            params.append(event_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    @staticmethod
    def _row_to_event(row: tuple[Any, ...]) -> SessionEvent:
        (event_id, user_id, event_type, content, project_id,
         entity_type, entity_id, metadata, created_at) = row
        return SessionEvent(
            id=event_id,
            user_id=user_id,
            event_type=SessionEventType(event_type),
            content=content or "",
            project_id=project_id,
            entity_type=EntityType(entity_type) if entity_type else None,
            entity_id=entity_id,
            metadata=json.loads(metadata) if metadata else {},
            created_at=datetime.fromisoformat(created_at),
        )

    async def list_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
        since: datetime | None = None,
        limit: int = 100,
    ) -> list[SessionEvent]:
        """List events matching the filters, newest first."""
        def _query() -> list[SessionEvent]:
            if not self._has_parts():
                return []
            where, params = self._where(event_types, user_id, since)
            conn = self._get_conn()
            rows = conn.execute(
                f"""
                SELECT {SESSION_EVENT_COLUMNS}
                FROM {self._source()}
                {where}
                ORDER BY created_at DESC
                LIMIT {max(0, int(limit))}
                """,
                params,
            ).fetchall()
            return [self._row_to_event(row) for row in rows]

        return await asyncio.to_thread(_query)

    async def get_event(self, event_id: str) -> SessionEvent | None:
        """Get one event by id."""
        def _query() -> SessionEvent | None:
            if not self._has_parts():
                return None
            where, params = self._where(None, None, event_id=event_id)
            row = self._get_conn().execute(
                f"SELECT {SESSION_EVENT_COLUMNS} FROM {self._source()} {where} LIMIT 1",
                params,
            ).fetchone()
            return self._row_to_event(row) if row else None

        return await asyncio.to_thread(_query)

    async def count_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
    ) -> int:
        """Count events matching the filters."""
        def _query() -> int:
            if not self._has_parts():
                return 0
            where, params = self._where(event_types, user_id)
            result = self._get_conn().execute(
                f"SELECT COUNT(*) FROM {self._source()} {where}",
                params,
            ).fetchone()
            return int(result[0]) if result else 0

        return await asyncio.to_thread(_query)
