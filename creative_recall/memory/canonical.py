"""
Canonical Content

Flattens an entity into the single text string used as embedding and search
input. Each entity variant has its own rule; parts are joined with ". " in a
fixed order and absent or blank fields are skipped.

    >>> canonicalize("task", {"title": "Mix vocals", "priority": "high"})
    'Mix vocals. Priority: high'

An empty result means "nothing to embed".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from creative_recall.types import EntityType

logger = logging.getLogger(__name__)

SEPARATOR = ". "


def _as_mapping(obj: Any) -> Mapping[str, Any]:
    if isinstance(obj, BaseModel):
        # Both field names and aliases resolve.
        return {**obj.model_dump(), **obj.model_dump(by_alias=True)}
    if isinstance(obj, Mapping):
        return obj
    return {}


def _scalar(value: Any) -> str | None:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _text(fields: Mapping[str, Any], *keys: str) -> str | None:
    """First non-blank value among ``keys``."""
    for key in keys:
        value = _scalar(fields.get(key))
        if value is not None:
            return value
    return None


def _joined(fields: Mapping[str, Any], key: str) -> str | None:
    value = fields.get(key)
    if not isinstance(value, (list, tuple)):
        return None
    items = [s for s in (_scalar(v) for v in value) if s is not None]
    return ", ".join(items) if items else None


def _labeled(parts: list[str], label: str, value: str | None) -> None:
    if value is not None:
        parts.append(f"{label}: {value}")


def _plain(parts: list[str], value: str | None) -> None:
    if value is not None:
        parts.append(value)


def _note(fields: Mapping[str, Any]) -> list[str]:
    parts: list[str] = []
    _plain(parts, _text(fields, "title", "name"))
    _plain(parts, _text(fields, "content", "description"))
    _labeled(parts, "Type", _text(fields, "type"))
    _labeled(parts, "Tags", _joined(fields, "tags"))

    memory = _as_mapping(fields.get("memory"))
    if memory:
        _plain(parts, _text(memory, "rawTranscript", "raw_transcript"))
        _labeled(parts, "Summary", _text(memory, "summary"))
        concepts = _joined(memory, "keyConcepts") or _joined(memory, "key_concepts")
        _labeled(parts, "Concepts", concepts)
    return parts


def _task(fields: Mapping[str, Any]) -> list[str]:
    parts: list[str] = []
    _plain(parts, _text(fields, "title", "name"))
    _plain(parts, _text(fields, "description"))
    _labeled(parts, "Status", _text(fields, "status"))
    _labeled(parts, "Priority", _text(fields, "priority"))
    return parts


def _project(fields: Mapping[str, Any]) -> list[str]:
    parts: list[str] = []
    _plain(parts, _text(fields, "title", "name"))
    _plain(parts, _text(fields, "description"))
    _labeled(parts, "Genre", _text(fields, "genre"))
    _labeled(parts, "Status", _text(fields, "status"))
    return parts


def _session_event(fields: Mapping[str, Any]) -> list[str]:
    parts: list[str] = []
    _plain(parts, _text(fields, "content"))
    _labeled(parts, "Event", _text(fields, "event_type", "eventType"))
    return parts


_RULES: dict[EntityType, Callable[[Mapping[str, Any]], list[str]]] = {
    EntityType.NOTE: _note,
    EntityType.TASK: _task,
    EntityType.PROJECT: _project,
    EntityType.SESSION_EVENT: _session_event,
}


def canonicalize(entity_type: EntityType | str, fields: Mapping[str, Any] | BaseModel | None) -> str:
    """
    Build the canonical text for an entity.

    Args:
        entity_type: Entity variant
        fields: Entity fields (mapping or pydantic model)

    Returns:
        Canonical text, or "" for unknown variants or entities without content.
        Never raises.
    """
    try:
        kind = EntityType(entity_type)
    except ValueError:
        logger.debug(f"No canonical form for entity type {entity_type!r}")
        return ""

    return SEPARATOR.join(_RULES[kind](_as_mapping(fields)))
