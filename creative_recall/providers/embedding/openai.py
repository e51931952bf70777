"""
OpenAI Embedding Provider (LangChain-based)

Implements EmbeddingProvider interface using LangChain's OpenAIEmbeddings.

Models:
    - text-embedding-3-small: 1536 dimensions, default
    - text-embedding-3-large: 3072 dimensions

Example:
    >>> provider = OpenAIEmbeddingProvider(model="text-embedding-3-small")
    >>> vector = await provider.embed_single("Task: Draft chapter two")
    >>> len(vector)
    1536
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from creative_recall.providers.base import EmbeddingProvider

if TYPE_CHECKING:
    from langchain_openai import OpenAIEmbeddings


# Model dimensions mapping
MODEL_DIMENSIONS = {
    "text-embedding-3-large": 3072,
    "text-embedding-3-small": 1536,
    "text-embedding-ada-002": 1536,
}

DEFAULT_MODEL = "text-embedding-3-small"


def _get_openai_embeddings(
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    timeout: float = 30.0,
) -> "OpenAIEmbeddings":
    """
    Get an OpenAIEmbeddings instance.

    Uses lazy import to avoid requiring langchain-openai unless actually used.

    Raises:
        ImportError: If langchain-openai package is not installed
    """
    try:
        from langchain_openai import OpenAIEmbeddings
    except ImportError:
        raise ImportError(
            "OpenAI embedding provider requires the 'langchain-openai' package. "
            "Install with: pip install creative-recall"
        )

    if api_key:
        from pydantic import SecretStr
        return OpenAIEmbeddings(
            model=model,
            api_key=SecretStr(api_key),
            timeout=timeout,
            max_retries=0,
        )
    return OpenAIEmbeddings(model=model, timeout=timeout, max_retries=0)


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    OpenAI embedding provider implementation using LangChain.

    Args:
        api_key: OpenAI API key. If None, uses OPENAI_API_KEY environment variable.
        model: Model to use (default: "text-embedding-3-small")
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._dimensions = MODEL_DIMENSIONS.get(model, 1536)
        # Lazy initialization
        self._client: OpenAIEmbeddings | None = None

    def _get_client(self) -> "OpenAIEmbeddings":
        """Get or create the OpenAIEmbeddings client."""
        if self._client is None:
            self._client = _get_openai_embeddings(
                api_key=self._api_key,
                model=self._model,
                timeout=self._timeout,
            )
        return self._client

    @property
    def dimensions(self) -> int:
        """Embedding dimensions for the current model."""
        return self._dimensions

    @property
    def model_name(self) -> str:
        """Current model name."""
        return self._model

    async def embed_single(self, text: str) -> list[float]:
        """
        Generate embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector
        """
        client = self._get_client()

        # LangChain's embed_query is synchronous, run in thread pool
        embedding = await asyncio.to_thread(client.embed_query, text)
        return embedding
