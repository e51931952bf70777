"""
Note Memory Extraction

Asks the generation model to pull structured memory out of a note's text:
a transcript, a short summary, key concepts, mentioned dates and action
items. The result is attached to the note and folded into its canonical
content, so later searches match on what the note is about.

Example:
    >>> extractor = NoteMemoryExtractor(chat)
    >>> memory = await extractor.extract("Call Sam about the bridge lyrics on Friday")
    >>> memory.detected_tasks
    ['Call Sam about the bridge lyrics']
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from creative_recall.types.memory import NoteMemory, SourceType

if TYPE_CHECKING:
    from creative_recall.clients.chat import ChatClient

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Prompts
# -----------------------------------------------------------------------------

_EXTRACTION_SYSTEM_PROMPT = """\
You analyze captured notes for a creative professional's personal memory.

Return a JSON object with the following fields:
- "rawTranscript": string or null. The full text, transcript, or OCR text the note contains
- "summary": string. A concise 1-3 sentence summary of the content
- "keyConcepts": string[]. 3-8 key concepts, topics, or themes found in the content
- "extractedDates": string[]. Any dates, deadlines, or time references (ISO format when possible)
- "detectedTasks": string[]. Any action items, to-dos, or tasks mentioned

Return ONLY valid JSON, no markdown fences, no explanation."""

_SOURCE_HINTS: dict[str, str] = {
    "image": (
        "The text was extracted from an image. Describe the visual idea in the summary "
        "and keep any handwritten or whiteboard content in rawTranscript."
    ),
    "voice": (
        "The text is a transcribed voice memo. Keep the spoken words in rawTranscript "
        "and summarize the key points discussed."
    ),
    "video": (
        "The text comes from a video. Keep spoken words and on-screen text in rawTranscript "
        "and describe both visual and audio content in the summary."
    ),
    "document": (
        "The text comes from a document. Summarize its purpose and key points."
    ),
}

EXTRACTION_TEMPERATURE = 0.2
EXTRACTION_MAX_OUTPUT_TOKENS = 4096


def build_extraction_prompt(text: str, source_type: SourceType = "text") -> str:
    hint = _SOURCE_HINTS.get(source_type)
    header = f"{hint}\n\n" if hint else ""
    return f"{header}Note content:\n{text}"


class NoteMemoryExtractor:
    """
    Extracts NoteMemory from note text.

    Args:
        chat: Chat client used for the generation call
    """

    FUNCTION_NAME = "extract_note_memory"

    def __init__(self, chat: "ChatClient") -> None:
        self._chat = chat

    async def extract(self, text: str, source_type: SourceType = "text") -> NoteMemory | None:
        """
        Extract memory fields from ``text``.

        Returns:
            NoteMemory, or None when the text is blank, the call fails, or the
            model output is not a JSON object. Never raises.
        """
        if not isinstance(text, str) or not text.strip():
            logger.debug("Skipping memory extraction: empty text")
            return None

        result = await self._chat.generate(
            build_extraction_prompt(text.strip(), source_type),
            system_prompt=_EXTRACTION_SYSTEM_PROMPT,
            temperature=EXTRACTION_TEMPERATURE,
            max_output_tokens=EXTRACTION_MAX_OUTPUT_TOKENS,
            function_name=self.FUNCTION_NAME,
        )
        if result is None:
            return None

        if not isinstance(result.data, dict):
            logger.warning("Memory extraction returned no JSON object")
            return None

        try:
            return NoteMemory.from_model_output(
                result.data,
                source_type=source_type,
                model_used=result.model,
            )
        except Exception as e:
            logger.warning(f"Could not build note memory: {e}")
            return None
