"""Shared fixtures."""

import pytest

from creative_recall.utils.background import BackgroundTasks
from tests.fakes import FakeEmbeddingProvider, InMemoryStore


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def background() -> BackgroundTasks:
    return BackgroundTasks()


@pytest.fixture(autouse=True)
def offline_token_counts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep token estimates offline (tiktoken downloads its BPE files on first use)."""
    monkeypatch.setattr("creative_recall.utils.token_count._encoding_for", lambda model: None)
