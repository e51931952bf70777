"""
Note Memory Types

Structured memory extracted from a note's content by the generation model.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SourceType = Literal["image", "voice", "video", "document", "text"]


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


class NoteMemory(BaseModel):
    """
    Memory fields extracted from a note.

    Serialized with camelCase aliases so stored notes keep the same shape
    the canonicalizer reads (``rawTranscript``, ``keyConcepts``, ...).
    """

    model_config = ConfigDict(populate_by_name=True)

    raw_transcript: str | None = Field(default=None, alias="rawTranscript")
    summary: str = "No summary available"
    key_concepts: list[str] = Field(default_factory=list, alias="keyConcepts")
    extracted_dates: list[str] = Field(default_factory=list, alias="extractedDates")
    detected_tasks: list[str] = Field(default_factory=list, alias="detectedTasks")
    source_type: SourceType = Field(default="text", alias="sourceType")
    extracted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="extractedAt"
    )
    model_used: str = Field(default="", alias="modelUsed")

    @classmethod
    def from_model_output(
        cls,
        data: dict[str, Any],
        *,
        source_type: SourceType = "text",
        model_used: str = "",
    ) -> "NoteMemory":
        """
        Build from loosely-typed model output.

        Wrong-typed fields fall back to defaults instead of failing.
        """
        transcript = data.get("rawTranscript")
        if not isinstance(transcript, str) or not transcript.strip():
            transcript = None
        summary = data.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            summary = "No summary available"
        return cls(
            raw_transcript=transcript.strip() if transcript else None,
            summary=summary.strip(),
            key_concepts=_string_list(data.get("keyConcepts")),
            extracted_dates=_string_list(data.get("extractedDates")),
            detected_tasks=_string_list(data.get("detectedTasks")),
            source_type=source_type,
            model_used=model_used,
        )
