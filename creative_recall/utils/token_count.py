"""
Token estimates for usage telemetry.

Uses tiktoken. tiktoken fetches its BPE files on first use; when they cannot
be loaded, a conservative character heuristic is used instead. Async callers
await ``load_encoding`` first so that fetch happens in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def _encoding_for(model: str) -> tiktoken.Encoding | None:
    """Resolve the tokenizer for ``model``, or None if it cannot be loaded."""
    try:
        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            return tiktoken.get_encoding("cl100k_base")
    except Exception as e:
        logger.debug(f"tiktoken encoding unavailable for {model}: {e}")
        return None


_loaded_models: set[str] = set()


async def load_encoding(model: str) -> None:
    """Resolve the tokenizer for ``model`` off the event loop, once per model."""
    if model in _loaded_models:
        return
    await asyncio.to_thread(_encoding_for, model)
    _loaded_models.add(model)


def count_text_tokens(text: str, model: str) -> int:
    """
    Estimate tokens for plain text.

    Falls back to a char-based heuristic when the tokenizer is unavailable.
    """
    if not text:
        return 0

    encoding = _encoding_for(model)
    if encoding is not None:
        return len(encoding.encode(text, disallowed_special=()))

    # Simple fallback: ~4 chars/token
    return max(1, (len(text) + 3) // 4)


def count_chat_tokens(messages: Iterable[str], model: str) -> int:
    """
    Estimate tokens for chat-style inputs.

    Adds a small fixed overhead per message for role/control tokens.
    """
    total = 0
    message_count = 0
    for message in messages:
        total += count_text_tokens(message, model)
        message_count += 1

    # Approximate role/message framing overhead.
    return total + (message_count * 4)
