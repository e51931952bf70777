"""Tests for fire-and-forget entity embedding."""

import pytest

from creative_recall.clients.embedding import EmbeddingClient
from creative_recall.memory.embedder import EntityEmbedder
from tests.fakes import FakeEmbeddingProvider


@pytest.fixture
def embedder(embedding_provider, store, background):
    return EntityEmbedder(EmbeddingClient(embedding_provider, store), background)


class TestEntityEmbedder:
    """Create/update workflow entry point."""

    @pytest.mark.asyncio
    async def test_embeds_canonical_content(self, embedder, embedding_provider, store, background):
        embedder.embed_task("t-1", {"title": "Mix vocals", "priority": "high"})
        await background.drain()

        assert embedding_provider.calls == ["Mix vocals. Priority: high"]
        assert "task:t-1" in store.embeddings

    @pytest.mark.asyncio
    async def test_returns_before_embedding(self, embedder, store, background):
        """The caller doesn't wait for the remote call."""
        assert embedder.embed_note("n-1", {"title": "Hook"}) is None
        assert store.embeddings == {}
        await background.drain()
        assert "note:n-1" in store.embeddings

    @pytest.mark.asyncio
    async def test_empty_entity_schedules_nothing(self, embedder, embedding_provider, background):
        embedder.embed_project("p-1", {"title": "  "})
        assert background.pending == 0
        await background.drain()
        assert embedding_provider.calls == []

    @pytest.mark.asyncio
    async def test_failure_is_not_raised(self, store, background):
        provider = FakeEmbeddingProvider(fail_on={"Night Drive"})
        embedder = EntityEmbedder(EmbeddingClient(provider, store), background)

        embedder.embed_project("p-1", {"title": "Night Drive"})
        await background.drain()

        assert store.embeddings == {}
