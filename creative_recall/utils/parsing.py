"""
Tolerant parsing of generation-model output.

Models often wrap structured output in markdown code fences. Consumers call
``parse_model_json`` and treat ``None`` as "no structured data".
"""

from __future__ import annotations

import json
import re
from typing import Any

# Opening fence with optional language tag (```json, ```JSON, ```jsonc, ```)
_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*(?:\r?\n)?")
_FENCE_CLOSE = re.compile(r"(?:\r?\n)?[ \t]*```$")


def _reject_constant(name: str) -> Any:
    # json accepts NaN/Infinity by default; strict JSON does not.
    raise ValueError(f"Non-standard JSON constant: {name}")


def strip_code_fences(text: str) -> str:
    """Remove one leading and one trailing markdown fence plus surrounding whitespace."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_model_json(raw_text: str | None) -> Any | None:
    """
    Parse JSON from raw model text.

    Strips leading/trailing code fences (with or without a language tag),
    then parses strictly.

    Args:
        raw_text: Raw text of the first model candidate

    Returns:
        The parsed JSON value, or None if the text is not valid JSON.
        Never raises.

    Example:
        >>> parse_model_json('```json\\n{"a": 1}\\n```')
        {'a': 1}
        >>> parse_model_json("not json") is None
        True
    """
    if not isinstance(raw_text, str):
        return None

    cleaned = strip_code_fences(raw_text)
    if not cleaned:
        return None

    try:
        return json.loads(cleaned, parse_constant=_reject_constant)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return None
