"""Shared test fixtures."""

import pytest

from tests.fakes import FakeAdapter, FakeEmbeddingAdapter


@pytest.fixture
def alpha():
    """Preferred adapter (priority 1)."""
    return FakeAdapter("Alpha", 1)


@pytest.fixture
def beta():
    """Second adapter (priority 2)."""
    return FakeAdapter("Beta", 2)


@pytest.fixture
def embedder():
    """Embedding-capable adapter (priority 3)."""
    return FakeEmbeddingAdapter("Gamma", 3)


@pytest.fixture(autouse=True)
def _clean_provider_env(monkeypatch):
    """Keep real credentials in the environment out of tests."""
    for var in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "GOOGLE_AI_API_KEY",
        "ANTHROPIC_API_KEY",
        "CLARITY_LLM_PROVIDERS",
        "OPENAI_MODEL",
        "GOOGLE_AI_MODEL",
        "ANTHROPIC_MODEL",
        "OLLAMA_URL",
        "OLLAMA_MODEL",
        "OLLAMA_EMBEDDING_MODEL",
    ):
        monkeypatch.delenv(var, raising=False)
