"""Tests for windowed batch embedding."""

import pytest

from creative_recall.clients.embedding import EmbeddingClient
from creative_recall.memory.batch import BatchEmbeddingCoordinator
from creative_recall.types import EmbeddingItem, EntityType
from tests.fakes import FakeEmbeddingProvider


def _items(n: int, prefix: str = "item") -> list[EmbeddingItem]:
    return [
        EmbeddingItem(entity_type=EntityType.NOTE, entity_id=f"n-{i}", content=f"{prefix} {i}")
        for i in range(n)
    ]


class TestWindowing:
    """Concurrency bounds."""

    @pytest.mark.asyncio
    async def test_peak_concurrency_bounded_by_window(self, store):
        """12 slow items never have more than 5 calls in flight."""
        provider = FakeEmbeddingProvider(delay=0.01)
        batch = BatchEmbeddingCoordinator(EmbeddingClient(provider, store))

        result = await batch.generate_embeddings_batch(_items(12))

        assert result.success == 12
        assert result.failed == 0
        assert provider.peak_in_flight <= 5
        assert provider.peak_in_flight == 5
        assert len(provider.calls) == 12

    @pytest.mark.asyncio
    async def test_custom_window(self, store):
        """The window size is configurable."""
        provider = FakeEmbeddingProvider(delay=0.01)
        batch = BatchEmbeddingCoordinator(EmbeddingClient(provider, store), window_size=2)

        await batch.generate_embeddings_batch(_items(7))

        assert provider.peak_in_flight == 2
        assert batch.window_size == 2

    @pytest.mark.asyncio
    async def test_next_window_waits_for_slowest_item(self, store):
        """No window-2 call starts until every window-1 call has finished."""
        items = _items(10)
        provider = FakeEmbeddingProvider(delays={"item 0": 0.05})
        batch = BatchEmbeddingCoordinator(EmbeddingClient(provider, store), window_size=5)

        result = await batch.generate_embeddings_batch(items)

        assert result.success == 10
        first_window = {item.content for item in items[:5]}
        second_window = {item.content for item in items[5:]}
        last_first_finish = max(
            i for i, (kind, text) in enumerate(provider.events)
            if kind == "finish" and text in first_window
        )
        first_second_start = min(
            i for i, (kind, text) in enumerate(provider.events)
            if kind == "start" and text in second_window
        )
        assert first_second_start > last_first_finish

    @pytest.mark.parametrize("size", [0, -1])
    def test_window_must_be_positive(self, store, size):
        """A window below 1 is rejected."""
        with pytest.raises(ValueError):
            BatchEmbeddingCoordinator(EmbeddingClient(FakeEmbeddingProvider(), store), size)


class TestCounting:
    """success + failed always equals the batch size."""

    @pytest.mark.asyncio
    async def test_mixed_failures(self, store):
        """Failures in some windows don't stop later windows."""
        items = _items(11)
        failing = {items[1].content, items[6].content, items[10].content}
        provider = FakeEmbeddingProvider(fail_on=failing)
        batch = BatchEmbeddingCoordinator(EmbeddingClient(provider, store))

        result = await batch.generate_embeddings_batch(items)

        assert result.success == 8
        assert result.failed == 3
        assert result.total == len(items)
        assert len(provider.calls) == 11
        assert len(store.embeddings) == 8

    @pytest.mark.asyncio
    async def test_skips_count_as_success(self, embedding_provider, store):
        """Empty content is a skip, counted as success."""
        batch = BatchEmbeddingCoordinator(EmbeddingClient(embedding_provider, store))
        items = [
            EmbeddingItem(entity_type=EntityType.TASK, entity_id="t-1", content=""),
            EmbeddingItem(entity_type=EntityType.TASK, entity_id="t-2", content="Mix vocals"),
        ]

        result = await batch.generate_embeddings_batch(items)

        assert (result.success, result.failed) == (2, 0)
        assert embedding_provider.calls == ["Mix vocals"]

    @pytest.mark.asyncio
    async def test_invalid_rows_count_as_failed(self, embedding_provider, store):
        """Rows that don't validate are failures, not exceptions."""
        batch = BatchEmbeddingCoordinator(EmbeddingClient(embedding_provider, store))
        rows = [
            {"entityType": "task", "entityId": "t-1", "content": "Mix vocals"},
            {"entityType": "idea", "entityId": "x", "content": "?"},
            {"entityType": "note"},
        ]

        result = await batch.generate_embeddings_batch(rows)

        assert (result.success, result.failed) == (1, 2)

    @pytest.mark.asyncio
    async def test_client_exception_counts_as_failed(self):
        """An exception escaping the client is counted, not raised."""

        class ExplodingClient:
            async def generate_embedding(self, *args):
                raise RuntimeError("boom")

        batch = BatchEmbeddingCoordinator(ExplodingClient())
        result = await batch.generate_embeddings_batch(_items(3))

        assert (result.success, result.failed) == (0, 3)

    @pytest.mark.asyncio
    async def test_empty_batch(self, embedding_provider, store):
        """An empty batch makes no calls."""
        batch = BatchEmbeddingCoordinator(EmbeddingClient(embedding_provider, store))
        result = await batch.generate_embeddings_batch([])
        assert result.total == 0
        assert embedding_provider.calls == []

    @pytest.mark.asyncio
    async def test_missing_batch(self, embedding_provider, store):
        """A None batch is treated as empty."""
        batch = BatchEmbeddingCoordinator(EmbeddingClient(embedding_provider, store))
        result = await batch.generate_embeddings_batch(None)
        assert (result.total, result.success, result.failed) == (0, 0, 0)
        assert embedding_provider.calls == []
