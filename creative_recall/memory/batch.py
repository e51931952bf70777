"""
Batch Embedding

Fans embedding generation out over many entities in fixed windows: every
item in a window runs concurrently, and the next window starts only after
the whole window has settled. Peak concurrent remote calls never exceed the
window size.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from creative_recall.types import BatchEmbeddingResult, EmbeddingItem

if TYPE_CHECKING:
    from creative_recall.clients.embedding import EmbeddingClient

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 5


class BatchEmbeddingCoordinator:
    """
    Windowed batch embedding.

    Args:
        client: Embedding client used for every item
        window_size: Items per window (must be at least 1)
    """

    def __init__(self, client: "EmbeddingClient", window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self._client = client
        self._window_size = window_size

    @property
    def window_size(self) -> int:
        return self._window_size

    async def generate_embeddings_batch(
        self,
        items: Iterable[EmbeddingItem | Mapping[str, Any]] | None,
    ) -> BatchEmbeddingResult:
        """
        Embed every item, one window at a time.

        Items that fail validation, fail remotely, or raise are counted as
        failed; skipped items (empty content) count as success.

        Returns:
            Counters with success + failed equal to the number of items
        """
        rows = list(items or ())
        result = BatchEmbeddingResult()

        for start in range(0, len(rows), self._window_size):
            window = rows[start:start + self._window_size]
            outcomes = await asyncio.gather(
                *(self._embed_one(row) for row in window),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if outcome is True:
                    result.success += 1
                else:
                    result.failed += 1

        logger.info(
            f"Batch embedding finished: {result.success} succeeded, "
            f"{result.failed} failed of {len(rows)}"
        )
        return result

    async def _embed_one(self, row: EmbeddingItem | Mapping[str, Any]) -> bool:
        try:
            item = row if isinstance(row, EmbeddingItem) else EmbeddingItem.model_validate(row)
        except Exception as e:
            logger.warning(f"Invalid batch item {row!r}: {e}")
            return False
        return await self._client.generate_embedding(item.entity_type, item.entity_id, item.content)
