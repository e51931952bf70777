"""
HTTP Semantic-Search Endpoint

Posts a SearchQuery payload (``query``, ``userId``, ``entityTypes``,
``limit``, ``threshold``) to the hosted search function and returns the
decoded JSON body. Validation of the body is left to the caller.
"""

from __future__ import annotations

from typing import Any

import httpx

from creative_recall.providers.base import SemanticSearchEndpoint
from creative_recall.providers.http_client import build_async_client
from creative_recall.types.search import SearchQuery


class HttpSemanticSearchEndpoint(SemanticSearchEndpoint):
    """
    Client for the remote search function.

    Raises ``httpx.HTTPError`` on transport failures and non-2xx statuses,
    and ``ValueError`` when the body is not a JSON object.
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = build_async_client(api_key=api_key, timeout=timeout, transport=transport)

    async def search(self, query: SearchQuery) -> dict[str, Any]:
        response = await self._client.post(self._url, json=query.to_payload())
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("search response is not a JSON object")
        return body

    async def close(self) -> None:
        await self._client.aclose()
