"""
Parquet Memory Store

Orchestrates the Parquet session log, DuckDB reads, and the LanceDB
embedding index.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import pyarrow as pa
import pyarrow.parquet as pq
from filelock import FileLock

from creative_recall.storage.base import MemoryStore
from creative_recall.storage.duckdb.queries import SessionEventQueries, format_timestamp
from creative_recall.storage.lancedb.indices import EmbeddingIndex
from creative_recall.types import (
    EmbeddingRecord,
    EntityRef,
    SessionEvent,
    SessionEventType,
)

logger = logging.getLogger(__name__)


class ParquetMemoryStore(MemoryStore):
    """
    Parquet-based memory store.

    Directory structure:
        data_path/
        ├── session_events.parquet/   # append-only part files
        │   ├── part-<ts>-<hex>.parquet
        │   └── ...
        ├── lancedb/
        │   └── embeddings.lance/
        └── metadata.json

    Thread safety:
        - Session log appends use file locking (.store.lock)
        - Embedding upserts use their own lock (lancedb.lock)
        - Reads are concurrent-safe (part files are immutable)
    """

    SCHEMA_VERSION = "1.0.0"
    SESSION_EVENTS = "session_events"

    def __init__(
        self,
        data_path: Path | str,
        *,
        compression: str = "zstd",
    ):
        self._data_path = Path(data_path)
        self._compression = compression
        self._lock = FileLock(self._data_path / ".store.lock", timeout=30)
        self._events_path = self._data_path / f"{self.SESSION_EVENTS}.parquet"
        self._index = EmbeddingIndex(self._data_path / "lancedb")
        self._queries = SessionEventQueries(self._events_path)
        self._initialized = False

    @property
    def data_path(self) -> Path:
        """Return the path to the store directory."""
        return self._data_path

    async def initialize(self) -> None:
        """Initialize storage directories."""
        if self._initialized:
            return

        def _init() -> None:
            self._data_path.mkdir(parents=True, exist_ok=True)
            self._write_metadata_if_missing()

        await asyncio.to_thread(_init)
        await self._index.initialize()
        await self._queries.initialize()
        self._initialized = True

    async def close(self) -> None:
        """Close storage."""
        await self._index.close()
        await self._queries.close()
        self._initialized = False

    def _write_metadata_if_missing(self) -> None:
        """Create metadata.json if it doesn't exist."""
        meta_path = self._data_path / "metadata.json"
        if not meta_path.exists():
            metadata = {
                "schema_version": self.SCHEMA_VERSION,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            meta_path.write_text(json.dumps(metadata, indent=2))

    # -------------------------------------------------------------------------
    # Parquet Schema
    # -------------------------------------------------------------------------

    @staticmethod
    def _session_event_schema() -> pa.Schema:
        return pa.schema([
            ("id", pa.string()),
            ("user_id", pa.string()),
            ("event_type", pa.string()),
            ("content", pa.string()),
            ("project_id", pa.string()),
            ("entity_type", pa.string()),
            ("entity_id", pa.string()),
            ("metadata", pa.string()),  # JSON-encoded dict
            ("created_at", pa.string()),  # fixed-width UTC text
        ])

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------

    async def upsert_embedding(self, record: EmbeddingRecord) -> None:
        await self._index.upsert(record)

    async def get_embedding(self, ref: EntityRef) -> EmbeddingRecord | None:
        return await self._index.get(ref)

    async def count_embeddings(self) -> int:
        return await self._index.count()

    # -------------------------------------------------------------------------
    # Session events
    # -------------------------------------------------------------------------

    async def insert_session_event(self, event: SessionEvent) -> str:
        """Append one event as a new part file and return its id."""
        event_id = event.id or str(uuid4())

        def _write() -> None:
            with self._lock:
                data: dict[str, list[Any]] = {
                    "id": [event_id],
                    "user_id": [event.user_id],
                    "event_type": [event.event_type.value],
                    "content": [event.content],
                    "project_id": [event.project_id],
                    "entity_type": [event.entity_type.value if event.entity_type else None],
                    "entity_id": [event.entity_id],
                    "metadata": [json.dumps(event.metadata, default=str)],
                    "created_at": [format_timestamp(event.created_at)],
                }
                self._append_to_parquet(data, self._session_event_schema())

        await asyncio.to_thread(_write)
        logger.debug(f"Inserted session event {event_id} ({event.event_type.value})")
        return event_id

    async def get_session_event(self, event_id: str) -> SessionEvent | None:
        return await self._queries.get_event(event_id)

    async def list_session_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
        since: datetime | None = None,
        limit: int = 100,
    ) -> list[SessionEvent]:
        return await self._queries.list_events(
            event_types=event_types,
            user_id=user_id,
            since=since,
            limit=limit,
        )

    async def count_session_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
    ) -> int:
        return await self._queries.count_events(event_types=event_types, user_id=user_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _append_to_parquet(self, data: dict[str, list[Any]], schema: pa.Schema) -> None:
        """
        Append rows as an immutable part file in the dataset directory.

        Parts are written to a temp name and renamed, so readers never see
        a partial file. A failed write removes its temp file.
        """
        table = pa.Table.from_pydict(data, schema=schema)
        self._events_path.mkdir(parents=True, exist_ok=True)

        now_part = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        part_name = f"part-{now_part}-{uuid4().hex}.parquet"
        part_path = self._events_path / part_name
        temp_part_path = self._events_path / f".{part_name}.tmp"
        try:
            pq.write_table(table, temp_part_path, compression=self._compression)
            temp_part_path.replace(part_path)
        except Exception:
            temp_part_path.unlink(missing_ok=True)
            raise
