"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from desk_assist.ingestion.models import SearchHit, StoredPoint
from desk_assist.vectorstore.base import VectorStoreBase

DIM = 8


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes for the pipeline's collaborators ──────────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory store that records every upsert call."""

    def __init__(self, *, fail: bool = False, healthy: bool = True) -> None:
        super().__init__("test-collection")
        self.upsert_calls: list[list[StoredPoint]] = []
        self.ensured: tuple[int, str] | None = None
        self.hits: list[SearchHit] = []
        self.last_query: list[float] | None = None
        self._fail = fail
        self._healthy = healthy

    async def ensure_collection(self, dim: int, distance: str = "cosine") -> None:
        self.ensured = (dim, distance)

    async def upsert(self, points: list[StoredPoint]) -> None:
        if self._fail:
            raise ConnectionError("vector store unreachable")
        self.upsert_calls.append(list(points))

    async def similarity_search(self, query_embedding: list[float], *, k: int = 5) -> list[SearchHit]:
        self.last_query = query_embedding
        return self.hits[:k]

    async def health_check(self) -> bool:
        return self._healthy


class FakeLLM:
    """Language model returning deterministic summaries and vectors.

    ``fail_summary`` makes :meth:`summarize` raise; ``fail_on_embed`` makes
    the embed call with that (0-based) call number raise.
    """

    def __init__(
        self,
        *,
        dim: int = DIM,
        fail_summary: bool = False,
        fail_on_embed: int | None = None,
    ) -> None:
        self.dim = dim
        self.fail_summary = fail_summary
        self.fail_on_embed = fail_on_embed
        self.summarize_calls: list[str] = []
        self.embed_calls: list[str] = []

    async def summarize(self, text: str) -> str:
        self.summarize_calls.append(text)
        if self.fail_summary:
            raise RuntimeError("model offline")
        return "A short summary."

    async def embed(self, text: str) -> list[float]:
        call = len(self.embed_calls)
        self.embed_calls.append(text)
        if self.fail_on_embed is not None and call == self.fail_on_embed:
            raise RuntimeError("embedding model offline")
        return [float(call)] * self.dim


class FakeExtractor:
    """Extractor that serves canned text regardless of the file contents."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.calls: list[str] = []

    def extract(self, path: str) -> str:
        self.calls.append(path)
        return self.text


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()
