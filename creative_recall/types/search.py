"""
Search Types

Request/response models for the remote semantic-search endpoint.

The wire format is camelCase (``entityType``, ``entityId``, ``content``);
models accept either the wire name or the Python field name.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from creative_recall.types.entities import EntityType


class SearchQuery(BaseModel):
    """
    A similarity query.

    Attributes:
        query_text: Natural-language query
        user_id: Owner whose content is searched
        entity_types: Entity variants to search
        limit: Maximum results (already clamped to the configured cap)
        threshold: Minimum similarity in [0, 1]
    """

    query_text: str
    user_id: str
    entity_types: list[EntityType]
    limit: int = Field(default=10, ge=1)
    threshold: float = Field(default=0.3, ge=0.0, le=1.0)

    def to_payload(self) -> dict[str, Any]:
        """Render the endpoint request body."""
        return {
            "query": self.query_text,
            "userId": self.user_id,
            "entityTypes": [t.value for t in self.entity_types],
            "limit": self.limit,
            "threshold": self.threshold,
        }


class SearchResult(BaseModel):
    """
    One matched entity.

    Attributes:
        entity_type: Entity variant
        entity_id: Entity identifier
        content_snippet: Indexed text (or a snippet of it)
        similarity: Similarity score in [0, 1]
        metadata: Display metadata (title, status, priority, ...)
    """

    model_config = ConfigDict(populate_by_name=True)

    entity_type: EntityType = Field(..., alias="entityType")
    entity_id: str = Field(..., alias="entityId")
    content_snippet: str = Field(default="", alias="content")
    similarity: float
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("similarity")
    @classmethod
    def _clamp_similarity(cls, value: float) -> float:
        return min(1.0, max(0.0, value))

    @field_validator("content_snippet", mode="before")
    @classmethod
    def _none_content(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class SearchResponse(BaseModel):
    """
    Endpoint response.

    ``fallback`` is set by the endpoint when vector similarity could not be
    computed and a secondary strategy was used. It is passed through as-is.
    """

    results: list[SearchResult] = Field(default_factory=list)
    count: int = 0
    fallback: bool = False

    @field_validator("results", mode="before")
    @classmethod
    def _none_results(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("fallback", mode="before")
    @classmethod
    def _none_fallback(cls, value: Any) -> Any:
        return False if value is None else value

    @classmethod
    def empty(cls) -> "SearchResponse":
        return cls()
