"""
Abstract Storage Interface

Defines the contract for the two persisted collections:

    - embeddings: one EmbeddingRecord per EntityRef (upsert)
    - session events: append-only log, also carrying usage telemetry rows

Stores raise on failure. Callers at the component boundary convert
failures into sentinel values.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from creative_recall.types import EmbeddingRecord, EntityRef, SessionEvent, SessionEventType


class MemoryStore(ABC):
    """
    Abstract interface for memory storage.

    Lifecycle:
        store = ParquetMemoryStore(path)
        await store.initialize()
        # ... operations ...
        await store.close()

    Or using context manager:
        async with ParquetMemoryStore(path) as store:
            await store.upsert_embedding(record)
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize storage (create directories, tables)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close storage and release resources."""
        ...

    async def __aenter__(self) -> "MemoryStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Embeddings
    # -------------------------------------------------------------------------

    @abstractmethod
    async def upsert_embedding(self, record: EmbeddingRecord) -> None:
        """Insert or replace the vector stored for ``record.ref``."""
        ...

    @abstractmethod
    async def get_embedding(self, ref: EntityRef) -> EmbeddingRecord | None:
        """Get the stored vector for an entity."""
        ...

    @abstractmethod
    async def count_embeddings(self) -> int:
        """Number of stored embedding records."""
        ...

    # -------------------------------------------------------------------------
    # Session events
    # -------------------------------------------------------------------------

    @abstractmethod
    async def insert_session_event(self, event: SessionEvent) -> str:
        """
        Append an event.

        Returns:
            The generated event id
        """
        ...

    @abstractmethod
    async def get_session_event(self, event_id: str) -> SessionEvent | None:
        """Get one event by id."""
        ...

    @abstractmethod
    async def list_session_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
        since: datetime | None = None,
        limit: int = 100,
    ) -> list[SessionEvent]:
        """List events, newest first."""
        ...

    @abstractmethod
    async def count_session_events(
        self,
        *,
        event_types: Sequence[SessionEventType] | None = None,
        user_id: str | None = None,
    ) -> int:
        """Count events matching the filters."""
        ...
