"""
Type Definitions

Pydantic models for all data structures.

Storage Models:
    - EmbeddingRecord - One vector per EntityRef
    - SessionEvent - Append-only session log row
    - UsageLogEntry - Remote model call, stored as a reserved-type SessionEvent

Identity:
    - EntityType, EntityRef

Operation Models:
    - EmbeddingOutcome, EmbeddingItem, BatchEmbeddingResult
    - SearchQuery, SearchResult, SearchResponse
    - NoteMemory
    - UsageReport, DailyCount
"""

from creative_recall.types.embeddings import (
    BatchEmbeddingResult,
    EmbeddingItem,
    EmbeddingOutcome,
    EmbeddingRecord,
)
from creative_recall.types.entities import SEARCHABLE_ENTITY_TYPES, EntityRef, EntityType
from creative_recall.types.events import (
    AI_EVENT_TYPES,
    DailyCount,
    SessionEvent,
    SessionEventType,
    UsageLogEntry,
    UsageReport,
)
from creative_recall.types.memory import NoteMemory
from creative_recall.types.search import SearchQuery, SearchResponse, SearchResult

__all__ = [
    # Identity
    "EntityType",
    "EntityRef",
    "SEARCHABLE_ENTITY_TYPES",
    # Storage Models
    "EmbeddingRecord",
    "SessionEvent",
    "SessionEventType",
    "UsageLogEntry",
    "AI_EVENT_TYPES",
    # Operation Models
    "EmbeddingOutcome",
    "EmbeddingItem",
    "BatchEmbeddingResult",
    "SearchQuery",
    "SearchResult",
    "SearchResponse",
    "NoteMemory",
    # Reporting
    "UsageReport",
    "DailyCount",
]
