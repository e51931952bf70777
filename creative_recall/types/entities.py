"""
Entity Types

Identity keys shared by every embedding operation.

Models:
    - EntityType: Closed set of embeddable entity variants
    - EntityRef: (entity_type, entity_id) identity key
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """Embeddable entity variants."""

    NOTE = "note"
    TASK = "task"
    PROJECT = "project"
    SESSION_EVENT = "session_event"

    def __str__(self) -> str:
        return self.value


# Default search filter; session events are recalled through their own queries.
SEARCHABLE_ENTITY_TYPES: tuple[EntityType, ...] = (
    EntityType.NOTE,
    EntityType.TASK,
    EntityType.PROJECT,
)


class EntityRef(BaseModel):
    """
    Identity key for an embedded entity.

    At most one EmbeddingRecord exists per EntityRef; writes for the same
    key replace the stored vector.

    Attributes:
        entity_type: Entity variant
        entity_id: Identifier assigned by the owning workflow
    """

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    entity_id: str = Field(..., min_length=1)

    @property
    def key(self) -> str:
        """Flat storage key, e.g. ``"task:1234"``."""
        return f"{self.entity_type.value}:{self.entity_id}"

    def __str__(self) -> str:
        return self.key
