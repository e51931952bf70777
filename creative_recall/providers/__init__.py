"""
Remote Model Providers

Provider-agnostic interfaces for the remote model service.

Modules:
    base: Abstract provider interfaces
    llm/: Text generation implementations
    embedding/: Embedding implementations
    search/: Semantic-search endpoint clients

Supported LLM Providers:
    - OpenAI (gpt-4o-mini, gpt-4o) via LangChain

Supported Embedding Providers:
    - OpenAI (text-embedding-3-small/large) via LangChain
    - Generic HTTP embed endpoint ({content} -> {vector}) via httpx

Design:
    - All providers implement abstract interfaces
    - Lazy import to avoid requiring all dependencies
    - No client-side retries: every non-success response is terminal
    - create_* factories build providers from RecallConfig
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from creative_recall.providers.base import EmbeddingProvider, LLMProvider, SemanticSearchEndpoint

if TYPE_CHECKING:
    from creative_recall.config.settings import RecallConfig


def create_llm_provider(config: "RecallConfig") -> LLMProvider:
    """Create LLM provider based on config."""
    provider = config.llm_provider.lower()

    if provider == "openai":
        from creative_recall.providers.llm.openai import OpenAILLMProvider
        return OpenAILLMProvider(
            api_key=config.openai_api_key,
            model=config.llm_model,
            timeout=config.request_timeout_seconds,
        )
    raise ValueError(f"Unknown LLM provider: {provider}")


def create_embedding_provider(config: "RecallConfig") -> EmbeddingProvider:
    """Create embedding provider based on config."""
    provider = config.embedding_provider.lower()

    if provider == "openai":
        from creative_recall.providers.embedding.openai import OpenAIEmbeddingProvider
        return OpenAIEmbeddingProvider(
            api_key=config.openai_api_key,
            model=config.embedding_model,
            timeout=config.request_timeout_seconds,
        )
    if provider == "http":
        if not config.embedding_endpoint_url:
            raise ValueError("embedding_endpoint_url is required for the http embedding provider")
        from creative_recall.providers.embedding.http import HttpEmbeddingProvider
        return HttpEmbeddingProvider(
            config.embedding_endpoint_url,
            api_key=config.endpoint_api_key,
            model=config.embedding_model,
            dimensions=config.embedding_dimensions,
            timeout=config.request_timeout_seconds,
        )
    raise ValueError(f"Unknown embedding provider: {provider}")


def create_search_endpoint(config: "RecallConfig") -> SemanticSearchEndpoint:
    """Create the semantic-search endpoint client based on config."""
    if not config.search_endpoint_url:
        raise ValueError("search_endpoint_url is not configured")

    from creative_recall.providers.search.http import HttpSemanticSearchEndpoint
    return HttpSemanticSearchEndpoint(
        config.search_endpoint_url,
        api_key=config.endpoint_api_key,
        timeout=config.request_timeout_seconds,
    )


__all__ = [
    "LLMProvider",
    "EmbeddingProvider",
    "SemanticSearchEndpoint",
    "create_llm_provider",
    "create_embedding_provider",
    "create_search_endpoint",
]
