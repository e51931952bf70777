"""
Abstract Provider Interfaces

Base classes for the three remote capabilities: text generation, embedding,
and semantic search.

Providers raise on failure. The clients in ``creative_recall.clients`` and
``creative_recall.memory`` convert failures into sentinel values.
"""

from abc import ABC, abstractmethod
from typing import Any

from creative_recall.types.search import SearchQuery


class LLMProvider(ABC):
    """Abstract interface for text generation providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> str:
        """Generate a completion and return the first candidate's raw text."""
        ...

    @abstractmethod
    def with_model(self, model: str) -> "LLMProvider":
        """Return a provider for a different model."""
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Current model name."""
        ...


class EmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate embedding for a single text."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Embedding dimensions."""
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Current model name."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None


class SemanticSearchEndpoint(ABC):
    """
    Abstract interface for the remote similarity search.

    Scoring, thresholding and any fallback strategy happen remotely.
    """

    @abstractmethod
    async def search(self, query: SearchQuery) -> dict[str, Any]:
        """Run a query and return the raw response body."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None
