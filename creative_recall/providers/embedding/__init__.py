"""
Embedding Provider Implementations

Available:
    OpenAIEmbeddingProvider: OpenAI embedding models via LangChain
    HttpEmbeddingProvider: Generic embed endpoint over HTTP
"""

from creative_recall.providers.embedding.http import HttpEmbeddingProvider
from creative_recall.providers.embedding.openai import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider", "HttpEmbeddingProvider"]
