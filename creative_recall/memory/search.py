"""
Semantic Search Gateway

Issues similarity queries to the remote search endpoint and normalizes the
response. Scoring and thresholding happen remotely; results are only
ordered by descending similarity and truncated to the requested limit.

Search is an optional enhancement for its callers: transport failures and
malformed responses yield an empty result instead of an exception.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from creative_recall.types import (
    SEARCHABLE_ENTITY_TYPES,
    EntityType,
    SearchQuery,
    SearchResponse,
    SearchResult,
)

if TYPE_CHECKING:
    from creative_recall.providers.base import SemanticSearchEndpoint
    from creative_recall.utils.usage_telemetry import UsageTelemetry

logger = logging.getLogger(__name__)


class SemanticSearchGateway:
    """
    Query-time access to the remote similarity search.

    Args:
        endpoint: Remote search endpoint
        default_limit: Limit used when a call passes none
        max_limit: Upper bound applied to every limit
        default_threshold: Threshold used when a call passes none
        telemetry: Optional usage recorder (one row per remote call)
    """

    FUNCTION_NAME = "semantic_search"
    MODEL_NAME = "remote-search"

    def __init__(
        self,
        endpoint: "SemanticSearchEndpoint",
        *,
        default_limit: int = 10,
        max_limit: int = 50,
        default_threshold: float = 0.3,
        telemetry: "UsageTelemetry | None" = None,
    ) -> None:
        if max_limit < 1:
            raise ValueError(f"max_limit must be at least 1, got {max_limit}")
        self._endpoint = endpoint
        self._telemetry = telemetry
        self._max_limit = max_limit
        self._default_limit = min(max(default_limit, 1), max_limit)
        self._default_threshold = min(1.0, max(0.0, default_threshold))

    def build_query(
        self,
        query_text: str,
        user_id: str,
        *,
        entity_types: Iterable[EntityType | str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> SearchQuery:
        """
        Normalize call options into a SearchQuery.

        A missing or non-positive ``limit`` uses the default and larger ones
        are capped at max_limit. ``threshold`` is clamped to [0, 1]. Unknown
        entity types are dropped and an empty filter falls back to notes,
        tasks and projects.
        """
        types: list[EntityType] = []
        for value in entity_types or ():
            try:
                kind = EntityType(value)
            except ValueError:
                logger.warning(f"Ignoring unknown entity type in search filter: {value!r}")
                continue
            if kind not in types:
                types.append(kind)
        if not types:
            types = list(SEARCHABLE_ENTITY_TYPES)

        if limit is None or limit < 1:
            lim = self._default_limit
        else:
            lim = min(limit, self._max_limit)
        thr = self._default_threshold if threshold is None else min(1.0, max(0.0, threshold))

        return SearchQuery(
            query_text=query_text.strip(),
            user_id=user_id,
            entity_types=types,
            limit=lim,
            threshold=thr,
        )

    async def search_with_status(
        self,
        query_text: str,
        user_id: str,
        *,
        entity_types: Iterable[EntityType | str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> SearchResponse:
        """
        Search and keep the endpoint's ``fallback`` flag.

        Returns:
            SearchResponse; empty on any failure. Never raises.
        """
        if not isinstance(query_text, str) or not query_text.strip() or not user_id:
            logger.debug("Skipping search: empty query or user")
            return SearchResponse.empty()

        try:
            query = self.build_query(
                query_text,
                user_id,
                entity_types=entity_types,
                limit=limit,
                threshold=threshold,
            )
        except Exception as e:
            logger.warning(f"Invalid search options: {e}")
            return SearchResponse.empty()

        start = time.perf_counter_ns()
        try:
            body = await self._endpoint.search(query)
        except Exception as e:
            self._record_usage(query, start, failed=True)
            logger.warning(f"Semantic search failed: {e}")
            return SearchResponse.empty()
        self._record_usage(query, start)

        return self._normalize(body, query.limit)

    async def search(
        self,
        query_text: str,
        user_id: str,
        *,
        entity_types: Iterable[EntityType | str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """
        Search the user's content by meaning.

        Returns:
            Results sorted by descending similarity, at most ``limit`` long;
            [] on any failure. Never raises.
        """
        response = await self.search_with_status(
            query_text,
            user_id,
            entity_types=entity_types,
            limit=limit,
            threshold=threshold,
        )
        return response.results

    @staticmethod
    def _normalize(body: Any, limit: int) -> SearchResponse:
        if not isinstance(body, dict):
            logger.warning("Semantic search returned a non-object body")
            return SearchResponse.empty()

        raw_results = body.get("results")
        if raw_results is None:
            raw_results = []
        if not isinstance(raw_results, list):
            logger.warning("Semantic search returned malformed results")
            return SearchResponse.empty()

        results: list[SearchResult] = []
        for raw in raw_results:
            try:
                results.append(SearchResult.model_validate(raw))
            except Exception as e:
                logger.warning(f"Dropping malformed search result: {e}")

        results.sort(key=lambda r: r.similarity, reverse=True)
        results = results[:limit]

        fallback = body.get("fallback") is True
        if fallback:
            logger.info("Semantic search used fallback mode")

        return SearchResponse(results=results, count=len(results), fallback=fallback)

    def _record_usage(self, query: SearchQuery, start_ns: int, *, failed: bool = False) -> None:
        if self._telemetry is None:
            return
        metadata: dict[str, Any] = {
            "entity_types": [t.value for t in query.entity_types],
            "limit": query.limit,
        }
        if failed:
            metadata["failed"] = True
        self._telemetry.record(
            self.FUNCTION_NAME,
            self.MODEL_NAME,
            user_id=query.user_id,
            duration_ms=(time.perf_counter_ns() - start_ns) // 1_000_000,
            metadata=metadata,
        )

    async def close(self) -> None:
        await self._endpoint.close()
