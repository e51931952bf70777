"""
LanceDB Embedding Index

Stores one vector per EntityRef in a single ``embeddings`` table.
"""

import asyncio
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

import lancedb
from filelock import FileLock

from creative_recall.storage.duckdb.queries import format_timestamp
from creative_recall.types import EmbeddingRecord, EntityRef, EntityType


class EmbeddingIndex:
    """
    Manages the LanceDB embeddings table.

    Table:
        - embeddings: entity_key, entity_type, entity_id, dimension,
          created_at, vector

    Upsert:
        Writes use ``merge_insert`` on ``entity_key`` so a key never holds
        more than one row. Writers are serialized with a file lock.

    Thread safety:
        Uses thread-local storage for connections since LanceDB connections
        may not be thread-safe and asyncio.to_thread() may use different threads.
    """

    TABLE = "embeddings"

    @staticmethod
    def _escape_sql_string(value: str) -> str:
        """Escape single quotes for SQL WHERE clauses."""
        return value.replace("'", "''")

    def __init__(self, lancedb_path: Path):
        self.path = lancedb_path
        self._local = threading.local()
        self._lock = FileLock(str(lancedb_path) + ".lock", timeout=30)
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize LanceDB (marks as ready, connections created per-thread)."""
        if self._initialized:
            return

        def _init() -> None:
            self.path.mkdir(parents=True, exist_ok=True)

        await asyncio.to_thread(_init)
        self._initialized = True

    async def close(self) -> None:
        """Close LanceDB connections."""
        self._initialized = False
        if hasattr(self._local, 'db'):
            self._local.db = None

    def _get_db(self) -> lancedb.DBConnection:
        """Get thread-local LanceDB connection, creating if needed."""
        if not self._initialized:
            raise RuntimeError("LanceDB not initialized. Call initialize() first.")

        db = getattr(self._local, 'db', None)
        if db is None:
            db = lancedb.connect(str(self.path))
            self._local.db = db
        return db

    @staticmethod
    def _table_names(db: lancedb.DBConnection) -> set[str]:
        """
        Return table names across LanceDB API variants.

        Recent LanceDB returns a response object from list_tables() with a
        `tables` attribute, while older versions return a plain list.
        """
        listed = db.list_tables()
        tables = getattr(listed, "tables", listed)
        return {str(name) for name in tables}

    def _has_table(self, db: lancedb.DBConnection) -> bool:
        return self.TABLE in self._table_names(db)

    async def upsert(self, record: EmbeddingRecord) -> None:
        """Insert or replace the vector for ``record.ref``."""
        row: dict[str, Any] = {
            "entity_key": record.ref.key,
            "entity_type": record.entity_type.value,
            "entity_id": record.entity_id,
            "dimension": record.dimension,
            "created_at": format_timestamp(record.created_at),
            "vector": record.vector,
        }

        def _upsert() -> None:
            with self._lock:
                db = self._get_db()
                if not self._has_table(db):
                    db.create_table(self.TABLE, [row])
                    return
                table = db.open_table(self.TABLE)
                (
                    table.merge_insert("entity_key")
                    .when_matched_update_all()
                    .when_not_matched_insert_all()
                    .execute([row])
                )

        await asyncio.to_thread(_upsert)

    async def get(self, ref: EntityRef) -> EmbeddingRecord | None:
        """Get the stored vector for ``ref``."""
        def _get() -> EmbeddingRecord | None:
            db = self._get_db()
            if not self._has_table(db):
                return None
            table = db.open_table(self.TABLE)
            key = self._escape_sql_string(ref.key)
            rows = table.search().where(f"entity_key = '{key}'").limit(1).to_list()
            if not rows:
                return None
            row = rows[0]
            return EmbeddingRecord(
                entity_type=EntityType(row["entity_type"]),
                entity_id=row["entity_id"],
                vector=[float(v) for v in row["vector"]],
                created_at=datetime.fromisoformat(row["created_at"]),
            )

        return await asyncio.to_thread(_get)

    async def count(self) -> int:
        """Number of stored vectors."""
        def _count() -> int:
            db = self._get_db()
            if not self._has_table(db):
                return 0
            return int(db.open_table(self.TABLE).count_rows())

        return await asyncio.to_thread(_count)
