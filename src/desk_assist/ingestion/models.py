"""Domain models for chunks, stored points, and ingestion results."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    """Stages of one ingestion run, in execution order.

    Runs only ever move forward; any stage may jump to ``FAILED``.
    """

    IDLE = "idle"
    EXTRACTED = "extracted"
    SUMMARIZED = "summarized"
    CHUNKED = "chunked"
    EMBEDDED = "embedded"
    STORED = "stored"
    DONE = "done"
    FAILED = "failed"


class Chunk(BaseModel):
    """One contiguous segment of a document."""

    index: int = Field(ge=0)
    text: str


class DocumentMetadata(BaseModel):
    """Document-level metadata attached to every stored chunk.

    Attributes
    ----------
    file_path:
        Path the document was ingested from, as given by the caller.
    file_name:
        Final path component (``"unknown"`` when the path has none).
    file_size:
        Size of the file in bytes.
    file_hash:
        SHA-256 hex digest of the whole file.
    chunk_index:
        Position of this chunk within the document (0-based).
    total_chunks:
        Number of chunks the document was split into.
    processed_at:
        UTC ISO-8601 timestamp of the ingestion run.
    summary:
        LLM summary of the full document.
    """

    file_path: str
    file_name: str
    file_size: int
    file_hash: str
    chunk_index: int = 0
    total_chunks: int = 0
    processed_at: str
    summary: str = ""

    def for_chunk(self, chunk_index: int) -> DocumentMetadata:
        """Return a copy of this template with *chunk_index* set."""
        return self.model_copy(update={"chunk_index": chunk_index})


class StoredPoint(BaseModel):
    """One vector-store entry: identifier, embedding, chunk text and metadata."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    vector: list[float]
    text: str
    metadata: DocumentMetadata


class SearchHit(BaseModel):
    """A stored chunk returned by similarity search."""

    id: str
    text: str
    score: float
    metadata: DocumentMetadata


class IngestResult(BaseModel):
    """Outcome of a successful ingestion run."""

    file_path: str
    chunks_processed: int
    stage: PipelineStage = PipelineStage.DONE
