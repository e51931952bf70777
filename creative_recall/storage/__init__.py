"""
Memory Storage

Embedded storage using DuckDB + LanceDB + Parquet files.

Modules:
    base: Abstract storage interface
    parquet/: Primary storage implementation
    lancedb/: Embedding index
    duckdb/: Session log queries

Store Directory Structure:
    my_store/
    ├── metadata.json               # Store metadata and schema version
    ├── session_events.parquet/     # Append-only session log (part files)
    └── lancedb/                    # Embedding index
        └── embeddings.lance/

Design Principles:
    - Zero infrastructure (embedded databases)
    - Portable (a store is just a directory)
    - Append-only log, upsert-only embeddings
"""

from creative_recall.storage.base import MemoryStore
from creative_recall.storage.parquet.backend import ParquetMemoryStore

__all__ = [
    "MemoryStore",
    "ParquetMemoryStore",
]
