"""
Parquet Memory Store

Primary storage implementation.

Modules:
    backend: ParquetMemoryStore class

Table Schemas:
    session_events.parquet/ (dataset of part files):
        id, user_id, event_type, content, project_id, entity_type,
        entity_id, metadata, created_at
"""

from creative_recall.storage.parquet.backend import ParquetMemoryStore

__all__ = ["ParquetMemoryStore"]
