"""
Entity Embedding

Entry point for entity create/update workflows: canonicalize the entity and
detach its embedding. The caller never waits for, or observes, the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from creative_recall.memory.canonical import canonicalize
from creative_recall.types import EntityType

if TYPE_CHECKING:
    from creative_recall.clients.embedding import EmbeddingClient
    from creative_recall.utils.background import BackgroundTasks

logger = logging.getLogger(__name__)

Fields = Mapping[str, Any] | BaseModel


class EntityEmbedder:
    """
    Fire-and-forget embedding for saved entities.

    Args:
        client: Embedding client
        background: Scheduler for the detached calls
    """

    def __init__(self, client: "EmbeddingClient", background: "BackgroundTasks") -> None:
        self._client = client
        self._background = background

    def embed_entity(self, entity_type: EntityType | str, entity_id: str, fields: Fields) -> None:
        """Canonicalize and embed in the background. Never raises."""
        content = canonicalize(entity_type, fields)
        if not content.strip():
            logger.debug(f"No content to embed for {entity_type}:{entity_id}")
            return

        self._background.spawn(
            self._run(entity_type, entity_id, content),
            name=f"embed:{entity_type}:{entity_id}",
        )

    def embed_note(self, note_id: str, note: Fields) -> None:
        self.embed_entity(EntityType.NOTE, note_id, note)

    def embed_task(self, task_id: str, task: Fields) -> None:
        self.embed_entity(EntityType.TASK, task_id, task)

    def embed_project(self, project_id: str, project: Fields) -> None:
        self.embed_entity(EntityType.PROJECT, project_id, project)

    async def _run(self, entity_type: EntityType | str, entity_id: str, content: str) -> None:
        ok = await self._client.generate_embedding(entity_type, entity_id, content)
        if ok:
            logger.info(f"Embedding generated for {entity_type} {entity_id}")
        else:
            logger.warning(f"Failed to generate embedding for {entity_type} {entity_id}")
