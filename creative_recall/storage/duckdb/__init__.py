"""
DuckDB Query Layer

Relational reads over the Parquet session-event log.

Modules:
    queries: SessionEventQueries class
"""

from creative_recall.storage.duckdb.queries import SessionEventQueries, format_timestamp

__all__ = ["SessionEventQueries", "format_timestamp"]
