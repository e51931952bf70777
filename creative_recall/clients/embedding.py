"""
Embedding Client

Generates a vector for one entity's canonical content and upserts it as the
entity's EmbeddingRecord. The single write path for embeddings.

Outcomes:
    - SKIPPED: content empty after trimming; no remote call is made
    - SUCCESS: vector generated and stored (replacing any prior vector)
    - FAILED: remote or storage failure; logged, never raised
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from creative_recall.config.pricing import usage_cost_metadata
from creative_recall.types import EmbeddingOutcome, EmbeddingRecord, EntityRef, EntityType
from creative_recall.utils.token_count import count_text_tokens, load_encoding

if TYPE_CHECKING:
    from creative_recall.providers.base import EmbeddingProvider
    from creative_recall.storage.base import MemoryStore
    from creative_recall.utils.usage_telemetry import UsageTelemetry

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Wraps the remote embed capability.

    Args:
        provider: Embedding provider
        store: Store owning the embedding collection
        telemetry: Optional usage recorder (one row per remote call)
    """

    FUNCTION_NAME = "generate_embedding"

    def __init__(
        self,
        provider: "EmbeddingProvider",
        store: "MemoryStore",
        telemetry: "UsageTelemetry | None" = None,
    ) -> None:
        self._provider = provider
        self._store = store
        self._telemetry = telemetry

    @property
    def model_name(self) -> str:
        return self._provider.model_name

    async def embed_entity(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        content: str | None,
    ) -> EmbeddingOutcome:
        """
        Embed ``content`` for one entity and store the vector.

        Never raises.
        """
        text = content.strip() if isinstance(content, str) else ""
        if not text:
            logger.debug(f"Skipping embedding for {entity_type}:{entity_id}: empty content")
            return EmbeddingOutcome.SKIPPED

        try:
            ref = EntityRef(entity_type=EntityType(entity_type), entity_id=entity_id)
        except Exception as e:
            logger.warning(f"Invalid entity reference {entity_type}:{entity_id}: {e}")
            return EmbeddingOutcome.FAILED

        start = time.perf_counter_ns()
        error: Exception | None = None
        vector: list[float] | None = None
        try:
            vector = await self._provider.embed_single(text)
        except Exception as e:
            error = e
        elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000
        await self._record_usage(text, int(elapsed_ms), failed=error is not None)

        if error is not None:
            logger.warning(f"Embedding request failed for {ref}: {error}")
            return EmbeddingOutcome.FAILED

        try:
            record = EmbeddingRecord.from_vector(ref, vector or [])
            await self._store.upsert_embedding(record)
        except Exception as e:
            logger.error(f"Could not store embedding for {ref}: {e}")
            return EmbeddingOutcome.FAILED

        logger.debug(f"Stored {record.dimension}-dim embedding for {ref}")
        return EmbeddingOutcome.SUCCESS

    async def generate_embedding(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        content: str | None,
    ) -> bool:
        """
        Boolean form of ``embed_entity``.

        Returns:
            True on success or skip (empty content), False on failure
        """
        outcome = await self.embed_entity(entity_type, entity_id, content)
        return outcome.ok

    async def _record_usage(self, text: str, duration_ms: int, *, failed: bool) -> None:
        if self._telemetry is None:
            return
        model = self._provider.model_name
        await load_encoding(model)
        tokens = count_text_tokens(text, model)
        metadata: dict[str, object] = usage_cost_metadata(model, input_tokens=tokens)
        if failed:
            metadata["failed"] = True
        self._telemetry.record(
            self.FUNCTION_NAME,
            model,
            token_estimate=tokens,
            duration_ms=duration_ms,
            metadata=metadata,
        )
