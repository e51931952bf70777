"""Shared httpx client construction for the remote function endpoints."""

from __future__ import annotations

from typing import Any

import httpx


def build_async_client(
    *,
    api_key: str | None = None,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build an AsyncClient with JSON headers and optional bearer auth.

    ``transport`` lets tests substitute ``httpx.MockTransport``.
    """
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    kwargs: dict[str, Any] = {
        "headers": headers,
        "timeout": httpx.Timeout(timeout),
    }
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)
