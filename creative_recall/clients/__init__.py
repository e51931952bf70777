"""
Remote Call Clients

Non-throwing wrappers around the remote model capabilities. Providers raise;
these clients convert every failure into a sentinel and a log line, and
record one usage row per remote call.

Modules:
    embedding: EmbeddingClient (embed + upsert)
    chat: ChatClient (generate + tolerant JSON parse)
"""

from creative_recall.clients.chat import ChatClient, ChatResult
from creative_recall.clients.embedding import EmbeddingClient

__all__ = ["EmbeddingClient", "ChatClient", "ChatResult"]
