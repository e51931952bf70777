"""Tests for the httpx-backed endpoint clients."""

import json

import httpx
import pytest

from creative_recall.config.settings import RecallConfig
from creative_recall.providers import (
    create_embedding_provider,
    create_llm_provider,
    create_search_endpoint,
)
from creative_recall.providers.embedding.http import EmbeddingResponseError, HttpEmbeddingProvider
from creative_recall.providers.search.http import HttpSemanticSearchEndpoint
from creative_recall.types import EntityType, SearchQuery

EMBED_URL = "https://functions.example.test/v1/generate-embedding"
SEARCH_URL = "https://functions.example.test/v1/semantic-search"


def _transport(status: int = 200, body=None, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


class TestHttpEmbeddingProvider:
    """Embed endpoint client."""

    @pytest.mark.asyncio
    async def test_posts_content_and_returns_vector(self):
        seen: list[httpx.Request] = []
        provider = HttpEmbeddingProvider(
            EMBED_URL, api_key="secret", dimensions=3,
            transport=_transport(body={"vector": [0.1, 2, -0.3]}, seen=seen),
        )

        vector = await provider.embed_single("Mix vocals")

        assert vector == [0.1, 2.0, -0.3]
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == EMBED_URL
        assert json.loads(request.content) == {"content": "Mix vocals"}
        assert request.headers["Authorization"] == "Bearer secret"
        await provider.close()

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self):
        provider = HttpEmbeddingProvider(EMBED_URL, transport=_transport(503, {"error": "busy"}))
        with pytest.raises(httpx.HTTPStatusError):
            await provider.embed_single("x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {},
        {"vector": []},
        {"vector": "0.1,0.2"},
        {"vector": [0.1, "a"]},
        {"vector": [True, 0.2]},
        [0.1, 0.2],
    ])
    async def test_malformed_vector_raises(self, body):
        provider = HttpEmbeddingProvider(EMBED_URL, transport=_transport(body=body))
        with pytest.raises(EmbeddingResponseError):
            await provider.embed_single("x")

    @pytest.mark.asyncio
    async def test_dimension_mismatch_raises(self):
        provider = HttpEmbeddingProvider(
            EMBED_URL, dimensions=4, transport=_transport(body={"vector": [0.1, 0.2]})
        )
        with pytest.raises(EmbeddingResponseError):
            await provider.embed_single("x")

    def test_no_auth_header_without_key(self):
        provider = HttpEmbeddingProvider(EMBED_URL, transport=_transport())
        assert "Authorization" not in provider._client.headers


class TestHttpSemanticSearchEndpoint:
    """Search endpoint client."""

    @pytest.mark.asyncio
    async def test_posts_query_payload(self):
        seen: list[httpx.Request] = []
        endpoint = HttpSemanticSearchEndpoint(
            SEARCH_URL, transport=_transport(body={"results": [], "count": 0}, seen=seen)
        )
        query = SearchQuery(
            query_text="bridge", user_id="u-1", entity_types=[EntityType.NOTE], limit=5, threshold=0.5
        )

        body = await endpoint.search(query)

        assert body == {"results": [], "count": 0}
        assert json.loads(seen[0].content) == {
            "query": "bridge", "userId": "u-1", "entityTypes": ["note"], "limit": 5, "threshold": 0.5,
        }
        await endpoint.close()

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        endpoint = HttpSemanticSearchEndpoint(SEARCH_URL, transport=_transport(500, {}))
        query = SearchQuery(query_text="q", user_id="u", entity_types=[EntityType.NOTE])
        with pytest.raises(httpx.HTTPStatusError):
            await endpoint.search(query)

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self):
        endpoint = HttpSemanticSearchEndpoint(SEARCH_URL, transport=_transport(body=[1, 2]))
        query = SearchQuery(query_text="q", user_id="u", entity_types=[EntityType.NOTE])
        with pytest.raises(ValueError):
            await endpoint.search(query)


class TestFactories:
    """Provider construction from config."""

    def test_http_embedding_requires_url(self):
        config = RecallConfig(embedding_provider="http", embedding_endpoint_url=None)
        with pytest.raises(ValueError):
            create_embedding_provider(config)

    def test_http_embedding(self):
        config = RecallConfig(
            embedding_provider="http", embedding_endpoint_url=EMBED_URL, embedding_model="remote"
        )
        provider = create_embedding_provider(config)
        assert isinstance(provider, HttpEmbeddingProvider)
        assert provider.model_name == "remote"

    def test_search_requires_url(self):
        with pytest.raises(ValueError):
            create_search_endpoint(RecallConfig(search_endpoint_url=None))

    def test_search_endpoint(self):
        endpoint = create_search_endpoint(RecallConfig(search_endpoint_url=SEARCH_URL))
        assert isinstance(endpoint, HttpSemanticSearchEndpoint)

    def test_unknown_providers(self):
        with pytest.raises(ValueError):
            create_llm_provider(RecallConfig(llm_provider="carrier-pigeon"))
        with pytest.raises(ValueError):
            create_embedding_provider(RecallConfig(embedding_provider="carrier-pigeon"))
