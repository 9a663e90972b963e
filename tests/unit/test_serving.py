"""Unit tests for the serving layer."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import DIM, FakeLLM, FakeVectorStore
from fastapi.testclient import TestClient

from desk_assist.config import settings
from desk_assist.ingestion.models import DocumentMetadata, SearchHit
from desk_assist.serving.app import create_app


@pytest.fixture()
def store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def llm() -> FakeLLM:
    return FakeLLM(dim=DIM)


@pytest.fixture(autouse=True)
def _small_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "embedding_dim", DIM)
    monkeypatch.setattr(settings, "chunk_size", 200)
    monkeypatch.setattr(settings, "chunk_overlap", 40)


@pytest.fixture()
def client(store: FakeVectorStore, llm: FakeLLM):
    with TestClient(create_app(store=store, llm=llm)) as test_client:
        yield test_client


def test_health_endpoint(client: TestClient) -> None:
    """GET /health should return 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_startup_ensures_collection(client: TestClient, store: FakeVectorStore) -> None:
    assert store.ensured == (DIM, "cosine")


def test_health_reports_unavailable_store(llm: FakeLLM) -> None:
    with TestClient(create_app(store=FakeVectorStore(healthy=False), llm=llm)) as client:
        response = client.get("/health")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


class TestIngestEndpoint:
    def test_success(self, client: TestClient, store: FakeVectorStore, tmp_path: Path) -> None:
        path = tmp_path / "doc.txt"
        path.write_text("Sentence one. " * 50, encoding="utf-8")

        response = client.post("/ingest", params={"path": str(path)})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["chunksProcessed"] == len(store.upsert_calls[0])
        assert body["message"] == f"Successfully processed {body['chunksProcessed']} chunks"

    def test_missing_path_parameter_is_400(self, client: TestClient, llm: FakeLLM) -> None:
        response = client.post("/ingest")
        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"error"}
        assert body["error"].startswith("Invalid request")
        assert "path" in body["error"]
        assert llm.summarize_calls == []

    def test_missing_file_is_400(self, client: TestClient, tmp_path: Path) -> None:
        response = client.post("/ingest", params={"path": str(tmp_path / "ghost.txt")})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Failed to extract text: File does not exist")

    def test_unsupported_type_is_400(self, client: TestClient, tmp_path: Path) -> None:
        path = tmp_path / "doc.docx"
        path.write_bytes(b"PK")
        response = client.post("/ingest", params={"path": str(path)})
        assert response.status_code == 400
        assert "Unsupported file type: docx" in response.json()["error"]

    def test_empty_file_is_400(self, client: TestClient, llm: FakeLLM, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("  \n", encoding="utf-8")
        response = client.post("/ingest", params={"path": str(path)})
        assert response.status_code == 400
        assert response.json() == {"error": "No text content found in file"}
        assert llm.summarize_calls == []

    def test_summary_failure_is_500(self, store: FakeVectorStore, tmp_path: Path) -> None:
        path = tmp_path / "doc.txt"
        path.write_text("Some text.", encoding="utf-8")
        with TestClient(create_app(store=store, llm=FakeLLM(fail_summary=True))) as client:
            response = client.post("/ingest", params={"path": str(path)})
        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to generate summary")
        assert store.upsert_calls == []

    def test_embedding_failure_is_500(self, store: FakeVectorStore, tmp_path: Path) -> None:
        path = tmp_path / "doc.txt"
        path.write_text("Some text.", encoding="utf-8")
        with TestClient(create_app(store=store, llm=FakeLLM(fail_on_embed=0))) as client:
            response = client.post("/ingest", params={"path": str(path)})
        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to generate embeddings")
        assert store.upsert_calls == []

    def test_store_failure_is_500(self, llm: FakeLLM, tmp_path: Path) -> None:
        path = tmp_path / "doc.txt"
        path.write_text("Some text.", encoding="utf-8")
        with TestClient(create_app(store=FakeVectorStore(fail=True), llm=llm)) as client:
            response = client.post("/ingest", params={"path": str(path)})
        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to store embeddings")


def test_search_endpoint(client: TestClient, store: FakeVectorStore, llm: FakeLLM) -> None:
    metadata = DocumentMetadata(
        file_path="/d/a.txt",
        file_name="a.txt",
        file_size=1,
        file_hash="h",
        processed_at="2024-01-01T00:00:00+00:00",
    )
    store.hits = [SearchHit(id="p1", text="match", score=0.8, metadata=metadata)]

    response = client.post("/search", json={"query": "what is it?", "limit": 3})

    assert response.status_code == 200
    results = response.json()["results"]
    assert [r["id"] for r in results] == ["p1"]
    assert results[0]["metadata"]["file_name"] == "a.txt"
    assert llm.embed_calls == ["what is it?"]
    assert store.last_query == [0.0] * DIM


def test_search_rejects_invalid_body(client: TestClient, llm: FakeLLM) -> None:
    response = client.post("/search", json={"limit": 0})
    assert response.status_code == 400
    assert set(response.json()) == {"error"}
    assert llm.embed_calls == []
