"""
CreativeRecall - Primary Entry Point

Wires providers, storage, and the memory pipeline together, and exposes the
operations creative-work features call.

A store is a self-contained directory:
    - session_events.parquet/: Append-only session log
    - lancedb/: Embedding index
    - metadata.json: Store metadata and version

Example:
    >>> async with CreativeRecall("./recall_data") as recall:
    ...     recall.embed_entity("task", "t-1", {"title": "Mix vocals", "priority": "high"})
    ...     recall.log_entity_action("u-1", "created", "task", "t-1", "Mix vocals")
    ...     results = await recall.search("vocal mixing", user_id="u-1")

Write-side methods (``embed_entity``, ``log_session``, ``log_entity_action``)
return immediately and run in the background; ``drain`` waits for them.
Every method is non-throwing: failures become sentinel values and a log line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from creative_recall.clients.chat import ChatClient, ChatResult
from creative_recall.clients.embedding import EmbeddingClient
from creative_recall.memory.batch import BatchEmbeddingCoordinator
from creative_recall.memory.embedder import EntityEmbedder
from creative_recall.memory.extraction import NoteMemoryExtractor
from creative_recall.memory.search import SemanticSearchGateway
from creative_recall.memory.session import SessionMemoryRecorder
from creative_recall.types import (
    BatchEmbeddingResult,
    EmbeddingItem,
    EntityType,
    NoteMemory,
    SearchResponse,
    SearchResult,
    SessionEventType,
    UsageReport,
)
from creative_recall.utils.background import BackgroundTasks
from creative_recall.utils.usage_telemetry import UsageTelemetry, telemetry_user

if TYPE_CHECKING:
    from creative_recall.config.settings import RecallConfig
    from creative_recall.providers.base import (
        EmbeddingProvider,
        LLMProvider,
        SemanticSearchEndpoint,
    )
    from creative_recall.storage.base import MemoryStore
    from creative_recall.types.memory import SourceType

logger = logging.getLogger(__name__)


class CreativeRecall:
    """
    Semantic memory for a creative-work application.

    Args:
        path: Store directory. Created if it doesn't exist.
        config: Optional configuration. Uses defaults if not provided.
        store: Override the Parquet store (tests, custom backends)
        llm: Override the configured LLM provider
        embeddings: Override the configured embedding provider
        search_endpoint: Override the configured search endpoint
    """

    def __init__(
        self,
        path: str | Path,
        config: "RecallConfig | None" = None,
        *,
        store: "MemoryStore | None" = None,
        llm: "LLMProvider | None" = None,
        embeddings: "EmbeddingProvider | None" = None,
        search_endpoint: "SemanticSearchEndpoint | None" = None,
    ) -> None:
        self._path = Path(path).resolve()

        # Lazy import to avoid circular imports
        if config is None:
            from creative_recall.config import RecallConfig
            config = RecallConfig()
        self._config = config

        if store is None:
            from creative_recall.storage.parquet.backend import ParquetMemoryStore
            store = ParquetMemoryStore(self._path, compression=config.parquet_compression)
        self._store = store

        from creative_recall.providers import create_embedding_provider, create_llm_provider
        self._llm = llm or create_llm_provider(config)
        self._embedding_provider = embeddings or create_embedding_provider(config)
        self._search_endpoint = search_endpoint

        self._background = BackgroundTasks()
        self._telemetry = UsageTelemetry(self._store, self._background)
        self._embedding_client = EmbeddingClient(
            self._embedding_provider, self._store, self._telemetry
        )
        self._chat = ChatClient(
            self._llm,
            self._telemetry,
            default_temperature=config.chat_temperature,
            default_max_output_tokens=config.chat_max_output_tokens,
        )
        self._embedder = EntityEmbedder(self._embedding_client, self._background)
        self._batch = BatchEmbeddingCoordinator(
            self._embedding_client, window_size=config.embedding_window_size
        )
        self._sessions = SessionMemoryRecorder(
            self._store,
            self._embedding_client,
            self._background,
            description_max_chars=config.session_description_max_chars,
        )
        self._extractor = NoteMemoryExtractor(self._chat)
        self._search: SemanticSearchGateway | None = None
        self._initialized = False

    def _get_search(self) -> SemanticSearchGateway | None:
        """Create the search gateway on first use."""
        if self._search is None:
            endpoint = self._search_endpoint
            if endpoint is None:
                if not self._config.search_endpoint_url:
                    return None
                from creative_recall.providers import create_search_endpoint
                endpoint = create_search_endpoint(self._config)
                self._search_endpoint = endpoint
            self._search = SemanticSearchGateway(
                endpoint,
                default_limit=self._config.search_default_limit,
                max_limit=self._config.search_max_limit,
                default_threshold=self._config.search_default_threshold,
                telemetry=self._telemetry,
            )
        return self._search

    def _ready(self, operation: str) -> bool:
        if not self._initialized:
            logger.warning(f"{operation} called before initialize(); dropped")
        return self._initialized

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Open the store."""
        if self._initialized:
            return
        self._path.mkdir(parents=True, exist_ok=True)
        await self._store.initialize()
        self._initialized = True

    async def __aenter__(self) -> "CreativeRecall":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def drain(self) -> None:
        """Wait for background work (embeddings, session rows, usage rows) to settle."""
        await self._background.drain()

    async def close(self) -> None:
        """Drain background work and release all resources."""
        await self.drain()
        if self._search is not None:
            await self._search.close()
            self._search = None
        elif self._search_endpoint is not None:
            await self._search_endpoint.close()
        self._search_endpoint = None
        await self._embedding_provider.close()
        if self._initialized:
            await self._store.close()
        self._initialized = False

    # === Properties ===

    @property
    def path(self) -> Path:
        """Path to the store directory."""
        return self._path

    @property
    def config(self) -> "RecallConfig":
        """Current configuration."""
        return self._config

    @property
    def store(self) -> "MemoryStore":
        return self._store

    @property
    def background(self) -> BackgroundTasks:
        return self._background

    # === Embeddings ===

    def embed_entity(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        fields: Mapping[str, Any],
        *,
        user_id: str | None = None,
    ) -> None:
        """Canonicalize an entity and embed it in the background."""
        if self._ready("embed_entity"):
            with telemetry_user(user_id):
                self._embedder.embed_entity(entity_type, entity_id, fields)

    async def generate_embedding(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        content: str,
    ) -> bool:
        """Embed already-canonical content and wait for the outcome."""
        if not self._ready("generate_embedding"):
            return False
        return await self._embedding_client.generate_embedding(entity_type, entity_id, content)

    async def embed_entities(
        self,
        items: Iterable[EmbeddingItem | Mapping[str, Any]] | None,
    ) -> BatchEmbeddingResult:
        """Embed many items in windows; returns success/failed counts."""
        rows = list(items or ())
        if not self._ready("embed_entities"):
            return BatchEmbeddingResult(failed=len(rows))
        return await self._batch.generate_embeddings_batch(rows)

    # === Search ===

    async def search_with_status(
        self,
        query: str,
        user_id: str,
        *,
        entity_types: Iterable[EntityType | str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> SearchResponse:
        """Search and keep the endpoint's fallback flag."""
        try:
            gateway = self._get_search()
        except Exception as e:
            logger.warning(f"Semantic search unavailable: {e}")
            return SearchResponse.empty()
        if gateway is None:
            logger.warning("Semantic search endpoint not configured")
            return SearchResponse.empty()

        return await gateway.search_with_status(
            query,
            user_id,
            entity_types=entity_types,
            limit=limit,
            threshold=threshold,
        )

    async def search(
        self,
        query: str,
        user_id: str,
        *,
        entity_types: Iterable[EntityType | str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """Search the user's notes, tasks, and projects by meaning."""
        response = await self.search_with_status(
            query,
            user_id,
            entity_types=entity_types,
            limit=limit,
            threshold=threshold,
        )
        return response.results

    # === Session memory ===

    def log_session(
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
        """Append a session event and embed it, all in the background."""
        if self._ready("log_session"):
            self._sessions.record(
                user_id,
                event_type,
                content,
                project_id=project_id,
                entity_type=entity_type,
                entity_id=entity_id,
                metadata=metadata,
            )

    async def log_session_now(
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
        Insert a session event and return its id; the embedding stays detached.

        Returns None if the insert failed.
        """
        if not self._ready("log_session_now"):
            return None
        return await self._sessions.log_event(
            user_id,
            event_type,
            content,
            project_id=project_id,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata=metadata,
        )

    def log_entity_action(
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
        """Log a created/updated/completed/status_changed entity action."""
        if self._ready("log_entity_action"):
            self._sessions.record_entity_action(
                user_id,
                action,
                entity_type,
                entity_id,
                title,
                details,
                project_id=project_id,
            )

    # === Generation ===

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        model: str | None = None,
        user_id: str | None = None,
    ) -> ChatResult | None:
        """Generate text; ``result.data`` holds parsed JSON when present."""
        with telemetry_user(user_id):
            return await self._chat.generate(
                prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                model=model,
            )

    async def extract_note_memory(
        self,
        text: str,
        source_type: "SourceType" = "text",
        *,
        user_id: str | None = None,
    ) -> NoteMemory | None:
        """Extract summary, concepts, dates, and tasks from note text."""
        with telemetry_user(user_id):
            return await self._extractor.extract(text, source_type)

    async def enrich_note(
        self,
        note_id: str,
        fields: Mapping[str, Any],
        *,
        text: str | None = None,
        source_type: "SourceType" = "text",
        user_id: str | None = None,
    ) -> NoteMemory | None:
        """
        Extract memory for a note and re-embed it with the memory folded in.

        Args:
            note_id: Note identifier
            fields: Note fields (title, content, type, tags, ...)
            text: Text to analyze; defaults to the note's content
            source_type: Where the text came from
            user_id: User attributed in usage telemetry

        Returns:
            The extracted memory, or None when extraction failed (the note
            is not re-embedded in that case).
        """
        source = text if text is not None else fields.get("content") or fields.get("description")
        if not isinstance(source, str):
            source = ""

        memory = await self.extract_note_memory(source, source_type, user_id=user_id)
        if memory is None:
            return None

        enriched = {**fields, "memory": memory.model_dump(by_alias=True)}
        self.embed_entity(EntityType.NOTE, note_id, enriched, user_id=user_id)
        return memory

    # === Reporting ===

    async def usage_report(
        self,
        days: int | None = None,
        *,
        user_id: str | None = None,
    ) -> UsageReport | None:
        """Aggregate AI usage from the session log; None if the log can't be read."""
        if not self._ready("usage_report"):
            return None
        try:
            return await self._telemetry.report(
                days if days is not None else self._config.usage_report_days,
                user_id=user_id,
                max_days=self._config.usage_report_max_days,
                row_limit=self._config.usage_report_row_limit,
            )
        except Exception as e:
            logger.error(f"Usage report failed: {e}")
            return None
