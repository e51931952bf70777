"""
Session Memory

Captures notable user actions as append-only session events and embeds them
for later recall.

Recording is two-phase and fully detached from the caller:
    1. Insert the event row and obtain its id. On failure, log and stop.
    2. Embed the event content under ("session_event", id) in a further
       detached task. Its outcome only reaches the log.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from creative_recall.types import EntityType, SessionEvent, SessionEventType
from creative_recall.utils.usage_telemetry import telemetry_user

if TYPE_CHECKING:
    from creative_recall.clients.embedding import EmbeddingClient
    from creative_recall.storage.base import MemoryStore
    from creative_recall.utils.background import BackgroundTasks

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_CHARS = 200
ELLIPSIS = "..."

# Entity actions and the session event each one logs.
ACTION_EVENT_TYPES: dict[str, SessionEventType] = {
    "created": SessionEventType.ENTITY_CREATED,
    "updated": SessionEventType.ENTITY_UPDATED,
    "completed": SessionEventType.TASK_COMPLETED,
    "status_changed": SessionEventType.PROJECT_STATUS_CHANGED,
}


def _detail(details: Mapping[str, Any], key: str) -> str | None:
    value = details.get(key)
    if value is None or value == "" or value is False:
        return None
    return str(value)


def build_session_content(
    action: str,
    entity_type: EntityType | str,
    title: str,
    details: Mapping[str, Any] | None = None,
    *,
    max_description_chars: int = DESCRIPTION_MAX_CHARS,
) -> str:
    """
    Compose a readable event line for an entity action.

    Example:
        >>> build_session_content("created", "task", "Mix vocals", {"priority": "high"})
        'task created: "Mix vocals". Priority: high'

    The description is cut to ``max_description_chars`` characters plus
    "..." when longer, bounding the size of embedding input.
    """
    kind = entity_type.value if isinstance(entity_type, EntityType) else str(entity_type)
    parts = [f'{kind} {action}: "{title}"']

    if details:
        for label, key in (("Genre", "genre"), ("Priority", "priority"), ("Status", "status")):
            value = _detail(details, key)
            if value is not None:
                parts.append(f"{label}: {value}")

        tags = details.get("tags")
        if isinstance(tags, (list, tuple)) and tags:
            parts.append(f"Tags: {', '.join(str(t) for t in tags)}")

        description = _detail(details, "description")
        if description is not None:
            if len(description) > max_description_chars:
                description = description[:max_description_chars] + ELLIPSIS
            parts.append(f"Description: {description}")

    return ". ".join(parts)


class SessionMemoryRecorder:
    """
    Appends session events and triggers their embeddings.

    Args:
        store: Session event log
        embeddings: Embedding client for phase 2
        background: Scheduler for detached work
        description_max_chars: Description cap used by ``record_entity_action``
    """

    def __init__(
        self,
        store: "MemoryStore",
        embeddings: "EmbeddingClient",
        background: "BackgroundTasks",
        *,
        description_max_chars: int = DESCRIPTION_MAX_CHARS,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._background = background
        self._description_max_chars = description_max_chars

    def record(
        self,
        user_id: str,
        event_type: SessionEventType | str,
        content: str,
        *,
        project_id: str | None = None,
        entity_type: EntityType | str | None = None,
        entity_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Log an event in the background. Returns immediately; never raises.
        """
        self._background.spawn(
            self.log_event(
                user_id,
                event_type,
                content,
                project_id=project_id,
                entity_type=entity_type,
                entity_id=entity_id,
                metadata=metadata,
            ),
            name=f"session:{event_type}",
        )

    async def log_event(
        self,
        user_id: str,
        event_type: SessionEventType | str,
        content: str,
        *,
        project_id: str | None = None,
        entity_type: EntityType | str | None = None,
        entity_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str | None:
        """
        Insert the event and detach its embedding.

        Returns:
            The new event id, or None if the insert failed. Never raises.
        """
        try:
            event = SessionEvent(
                user_id=user_id,
                event_type=SessionEventType(event_type),
                content=content,
                project_id=project_id,
                entity_type=EntityType(entity_type) if entity_type else None,
                entity_id=entity_id,
                metadata=metadata or {},
            )
            event_id = await self._store.insert_session_event(event)
        except Exception as e:
            logger.error(f"[session] insert failed for {event_type}: {e}")
            return None

        self._background.spawn(
            self._embed(event_id, content, user_id),
            name=f"embed:session_event:{event_id}",
        )
        return event_id

    def record_entity_action(
        self,
        user_id: str,
        action: str,
        entity_type: EntityType | str,
        entity_id: str,
        title: str,
        details: Mapping[str, Any] | None = None,
        *,
        project_id: str | None = None,
    ) -> None:
        """
        Log a created/updated/completed/status_changed action for an entity.

        Unknown actions are logged as ``entity_updated``.
        """
        try:
            content = build_session_content(
                action,
                entity_type,
                title,
                details,
                max_description_chars=self._description_max_chars,
            )
        except Exception as e:
            logger.error(f"[session] could not build content for {entity_type}:{entity_id}: {e}")
            return
        event_type = ACTION_EVENT_TYPES.get(action, SessionEventType.ENTITY_UPDATED)
        self.record(
            user_id,
            event_type,
            content,
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata={"action": action},
        )

    async def _embed(self, event_id: str, content: str, user_id: str | None) -> None:
        with telemetry_user(user_id):
            ok = await self._embeddings.generate_embedding(
                EntityType.SESSION_EVENT, event_id, content
            )
        if ok:
            logger.debug(f"[session] embedded session event {event_id}")
        else:
            logger.warning(f"[session] embedding failed for session event {event_id}")
