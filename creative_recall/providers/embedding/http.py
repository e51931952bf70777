"""
HTTP Embedding Provider

Calls a hosted embed function: ``POST {url}`` with ``{"content": text}``,
expecting ``{"vector": [...]}`` back. Any non-2xx status or malformed body
raises; nothing is retried.
"""

from __future__ import annotations

import logging
import math

import httpx

from creative_recall.providers.base import EmbeddingProvider
from creative_recall.providers.http_client import build_async_client

logger = logging.getLogger(__name__)


class EmbeddingResponseError(ValueError):
    """The embed endpoint returned a body without a usable vector."""


class HttpEmbeddingProvider(EmbeddingProvider):
    """
    Embedding provider backed by a remote embed endpoint.

    Args:
        url: Endpoint URL
        api_key: Optional bearer token
        model: Model name reported for telemetry
        dimensions: Expected vector length (0 disables the check)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests)
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        model: str = "remote-embed",
        dimensions: int = 0,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._model = model
        self._dimensions = dimensions
        self._client = build_async_client(api_key=api_key, timeout=timeout, transport=transport)

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def model_name(self) -> str:
        return self._model

    async def embed_single(self, text: str) -> list[float]:
        response = await self._client.post(self._url, json={"content": text})
        response.raise_for_status()

        body = response.json()
        vector = body.get("vector") if isinstance(body, dict) else None
        if not isinstance(vector, list) or not vector:
            raise EmbeddingResponseError("embed response has no vector")

        values: list[float] = []
        for v in vector:
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise EmbeddingResponseError("embed response vector has non-numeric values")
            values.append(float(v))

        if self._dimensions and len(values) != self._dimensions:
            raise EmbeddingResponseError(
                f"embed response has {len(values)} dimensions, expected {self._dimensions}"
            )
        return values

    async def close(self) -> None:
        await self._client.aclose()
