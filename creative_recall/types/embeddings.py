"""
Embedding Types

Storage Models:
    - EmbeddingRecord: One vector per EntityRef (upsert semantics)

Operation Models:
    - EmbeddingOutcome: success / skipped / failed result of one embed call
    - EmbeddingItem: Batch input row
    - BatchEmbeddingResult: Per-batch success/failed counters
"""

import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from creative_recall.types.entities import EntityRef, EntityType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmbeddingOutcome(str, Enum):
    """Outcome of a single embedding attempt."""

    SUCCESS = "success"
    SKIPPED = "skipped"  # Empty canonical content; not an error
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        """True for success and skip, False for failure."""
        return self is not EmbeddingOutcome.FAILED


class EmbeddingRecord(BaseModel):
    """
    A stored embedding vector for one entity.

    Attributes:
        entity_type: Entity variant
        entity_id: Entity identifier
        vector: Embedding values (non-empty, finite)
        dimension: Always equal to len(vector)
        created_at: When the vector was generated (UTC)
    """

    entity_type: EntityType
    entity_id: str = Field(..., min_length=1)
    vector: list[float] = Field(..., min_length=1)
    dimension: int = 0
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("vector")
    @classmethod
    def _finite(cls, value: list[float]) -> list[float]:
        if not all(math.isfinite(v) for v in value):
            raise ValueError("embedding vector contains non-finite values")
        return value

    @model_validator(mode="after")
    def _sync_dimension(self) -> "EmbeddingRecord":
        self.dimension = len(self.vector)
        return self

    @property
    def ref(self) -> EntityRef:
        return EntityRef(entity_type=self.entity_type, entity_id=self.entity_id)

    @classmethod
    def from_vector(cls, ref: EntityRef, vector: list[float]) -> "EmbeddingRecord":
        """Build a record for ``ref`` from a raw provider vector."""
        return cls(
            entity_type=ref.entity_type,
            entity_id=ref.entity_id,
            vector=[float(v) for v in vector],
        )


class EmbeddingItem(BaseModel):
    """One entity to embed in a batch."""

    model_config = ConfigDict(populate_by_name=True)

    entity_type: EntityType = Field(..., alias="entityType")
    entity_id: str = Field(..., alias="entityId", min_length=1)
    content: str = ""


class BatchEmbeddingResult(BaseModel):
    """
    Counters for a batch run.

    Invariant: success + failed equals the number of submitted items.
    """

    success: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed
