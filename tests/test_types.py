"""Tests for data model types."""

import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from creative_recall.types import (
    BatchEmbeddingResult,
    EmbeddingItem,
    EmbeddingOutcome,
    EmbeddingRecord,
    EntityRef,
    EntityType,
    NoteMemory,
    SearchQuery,
    SearchResponse,
    SearchResult,
    SessionEventType,
    UsageLogEntry,
)


class TestEntityRef:
    """Tests for EntityRef type."""

    def test_key_joins_type_and_id(self):
        """EntityRef key is '<type>:<id>'."""
        ref = EntityRef(entity_type=EntityType.TASK, entity_id="t-1")
        assert ref.key == "task:t-1"
        assert str(ref) == "task:t-1"

    def test_accepts_string_type(self):
        """EntityRef coerces the wire string to EntityType."""
        ref = EntityRef(entity_type="session_event", entity_id="e-1")
        assert ref.entity_type is EntityType.SESSION_EVENT

    def test_rejects_unknown_type(self):
        """EntityRef rejects types outside the closed set."""
        with pytest.raises(ValidationError):
            EntityRef(entity_type="idea", entity_id="x")

    def test_rejects_empty_id(self):
        """EntityRef requires a non-empty id."""
        with pytest.raises(ValidationError):
            EntityRef(entity_type=EntityType.NOTE, entity_id="")

    def test_is_hashable(self):
        """Frozen refs can key a dict."""
        a = EntityRef(entity_type=EntityType.NOTE, entity_id="n-1")
        b = EntityRef(entity_type=EntityType.NOTE, entity_id="n-1")
        assert {a: 1}[b] == 1


class TestEmbeddingRecord:
    """Tests for EmbeddingRecord type."""

    def test_dimension_tracks_vector(self):
        """dimension always equals len(vector)."""
        record = EmbeddingRecord(
            entity_type=EntityType.NOTE, entity_id="n-1", vector=[0.1, 0.2, 0.3], dimension=99
        )
        assert record.dimension == 3

    def test_rejects_empty_vector(self):
        """A record needs at least one value."""
        with pytest.raises(ValidationError):
            EmbeddingRecord(entity_type=EntityType.NOTE, entity_id="n-1", vector=[])

    def test_rejects_non_finite_values(self):
        """NaN and infinity are not valid embedding values."""
        with pytest.raises(ValidationError):
            EmbeddingRecord(entity_type=EntityType.NOTE, entity_id="n-1", vector=[0.1, math.nan])

    def test_from_vector(self):
        """from_vector copies the ref and coerces values to float."""
        ref = EntityRef(entity_type=EntityType.PROJECT, entity_id="p-1")
        record = EmbeddingRecord.from_vector(ref, [1, 2])
        assert record.ref == ref
        assert record.vector == [1.0, 2.0]
        assert record.created_at.tzinfo is not None


class TestEmbeddingOutcome:
    """Tests for EmbeddingOutcome."""

    def test_ok(self):
        """Success and skip are ok; failure is not."""
        assert EmbeddingOutcome.SUCCESS.ok
        assert EmbeddingOutcome.SKIPPED.ok
        assert not EmbeddingOutcome.FAILED.ok


class TestEmbeddingItem:
    """Tests for batch items."""

    def test_accepts_wire_aliases(self):
        """Batch items accept camelCase wire names."""
        item = EmbeddingItem.model_validate(
            {"entityType": "task", "entityId": "t-1", "content": "Mix vocals"}
        )
        assert item.entity_type is EntityType.TASK
        assert item.entity_id == "t-1"

    def test_accepts_field_names(self):
        """Batch items also accept Python field names."""
        item = EmbeddingItem(entity_type=EntityType.NOTE, entity_id="n-1")
        assert item.content == ""

    def test_batch_result_total(self):
        """total is success + failed."""
        assert BatchEmbeddingResult(success=3, failed=2).total == 5


class TestSearchTypes:
    """Tests for search request/response types."""

    def test_query_payload_uses_wire_names(self):
        """to_payload renders the endpoint body."""
        query = SearchQuery(
            query_text="vocal ideas",
            user_id="u-1",
            entity_types=[EntityType.NOTE, EntityType.TASK],
            limit=5,
            threshold=0.4,
        )
        assert query.to_payload() == {
            "query": "vocal ideas",
            "userId": "u-1",
            "entityTypes": ["note", "task"],
            "limit": 5,
            "threshold": 0.4,
        }

    def test_query_rejects_out_of_range_threshold(self):
        """threshold must be within [0, 1]."""
        with pytest.raises(ValidationError):
            SearchQuery(query_text="x", user_id="u", entity_types=[EntityType.NOTE], threshold=1.5)

    def test_result_from_wire(self):
        """SearchResult reads the wire format."""
        result = SearchResult.model_validate({
            "entityType": "project",
            "entityId": "p-1",
            "content": "Album: Night Drive",
            "similarity": 0.82,
            "metadata": {"title": "Night Drive"},
        })
        assert result.content_snippet == "Album: Night Drive"
        assert result.metadata["title"] == "Night Drive"

    def test_result_clamps_similarity(self):
        """Similarity is clamped into [0, 1]."""
        high = SearchResult(entity_type="note", entity_id="n", similarity=1.2)
        low = SearchResult(entity_type="note", entity_id="n", similarity=-0.1)
        assert high.similarity == 1.0
        assert low.similarity == 0.0

    def test_result_tolerates_null_content_and_metadata(self):
        """Null content/metadata become empty values."""
        result = SearchResult.model_validate(
            {"entityType": "note", "entityId": "n", "similarity": 0.5,
             "content": None, "metadata": None}
        )
        assert result.content_snippet == ""
        assert result.metadata == {}

    def test_response_defaults(self):
        """Empty response has no results and no fallback."""
        response = SearchResponse.empty()
        assert response.results == []
        assert response.count == 0
        assert response.fallback is False


class TestUsageLogEntry:
    """Tests for UsageLogEntry."""

    def test_to_session_event(self):
        """Usage entries become reserved-type session events."""
        ts = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        entry = UsageLogEntry(
            function_name="generate_embedding",
            user_id="u-1",
            model="text-embedding-3-small",
            token_estimate=12,
            duration_ms=40,
            timestamp=ts,
            metadata={"estimated_cost_usd": 0.0},
        )
        event = entry.to_session_event()
        assert event.event_type is SessionEventType.API_USAGE
        assert event.content == "AI API call: generate_embedding (text-embedding-3-small)"
        assert event.user_id == "u-1"
        assert event.created_at == ts
        assert event.metadata["function_name"] == "generate_embedding"
        assert event.metadata["input_tokens_estimate"] == 12
        assert event.metadata["cached"] is False
        assert event.metadata["duration_ms"] == 40
        assert event.metadata["estimated_cost_usd"] == 0.0

    def test_requires_function_name(self):
        """function_name can't be empty."""
        with pytest.raises(ValidationError):
            UsageLogEntry(function_name="", model="m")


class TestNoteMemory:
    """Tests for NoteMemory."""

    def test_from_model_output(self):
        """Model output maps onto fields."""
        memory = NoteMemory.from_model_output(
            {
                "rawTranscript": "  chorus idea  ",
                "summary": "A chorus idea.",
                "keyConcepts": ["chorus", "", 3],
                "extractedDates": ["2026-05-01"],
                "detectedTasks": ["Record demo"],
            },
            source_type="voice",
            model_used="gpt-4o-mini",
        )
        assert memory.raw_transcript == "chorus idea"
        assert memory.summary == "A chorus idea."
        assert memory.key_concepts == ["chorus", "3"]
        assert memory.detected_tasks == ["Record demo"]
        assert memory.source_type == "voice"

    def test_defaults_for_missing_or_wrong_types(self):
        """Missing summary and wrong-typed lists fall back to defaults."""
        memory = NoteMemory.from_model_output({"keyConcepts": "not a list", "summary": ""})
        assert memory.summary == "No summary available"
        assert memory.key_concepts == []
        assert memory.raw_transcript is None

    def test_dump_uses_camel_case(self):
        """Serialized memory uses the camelCase aliases."""
        dumped = NoteMemory(summary="s", key_concepts=["a"]).model_dump(by_alias=True)
        assert dumped["keyConcepts"] == ["a"]
        assert "rawTranscript" in dumped
