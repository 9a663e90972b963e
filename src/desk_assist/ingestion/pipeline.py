"""Ingestion orchestrator — extract, summarise, chunk, embed, store.

One call to :meth:`IngestionPipeline.ingest` is one ingestion run.  The
stages execute strictly in order and any failure is terminal for the run:

1. **Extract** the document text and fingerprint the file.
2. **Summarise** the full text with the language model.
3. **Chunk** the text (:func:`~desk_assist.ingestion.chunker.chunk_text`).
4. **Embed** every chunk, one call at a time, in chunk order.
5. **Assemble** one :class:`StoredPoint` per chunk/embedding pair.
6. **Store** all points with a single upsert.

Nothing reaches the vector store unless every chunk has been embedded, so a
failed run never leaves partial data behind.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from desk_assist.errors import (
    AlignmentError,
    EmbeddingError,
    EmptyContentError,
    ExtractionError,
    ExtractionErrorKind,
    IngestionError,
    StoreError,
    SummaryError,
)
from desk_assist.ingestion.chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, chunk_text
from desk_assist.ingestion.loader import fingerprint
from desk_assist.ingestion.models import (
    Chunk,
    DocumentMetadata,
    IngestResult,
    PipelineStage,
    StoredPoint,
)
from desk_assist.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)


class DocumentExtractor(Protocol):
    def extract(self, path: str) -> str: ...


class LanguageModel(Protocol):
    async def summarize(self, text: str) -> str: ...

    async def embed(self, text: str) -> list[float]: ...


class IngestionPipeline:
    """Drives one document at a time through the ingestion stages.

    The pipeline only holds the shared capability handles and settings; all
    per-document state lives inside :meth:`ingest`, so one instance can
    serve concurrent requests.

    Parameters
    ----------
    extractor:
        Turns a file path into text.
    llm:
        Produces summaries and embeddings.
    store:
        Vector store receiving the assembled points.
    chunk_size:
        Maximum characters per chunk.
    chunk_overlap:
        Characters shared between consecutive chunks.
    embedding_dim:
        Required length of every embedding vector.
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        llm: LanguageModel,
        store: VectorStoreBase,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        embedding_dim: int = 768,
    ) -> None:
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
            )
        self._extractor = extractor
        self._llm = llm
        self._store = store
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.embedding_dim = embedding_dim

    # -- public API -----------------------------------------------------------

    async def ingest(self, path: str) -> IngestResult:
        """Ingest the document at *path* and return the number of stored chunks.

        Raises
        ------
        IngestionError
            The subclass matching the stage that failed.  Nothing has been
            written to the vector store when this is raised.
        """
        logger.info("Processing ingest request for path: %s", path)
        stage = PipelineStage.IDLE
        try:
            text, file_size, file_hash = await self._extract(path)
            stage = self._advance(path, PipelineStage.EXTRACTED)

            summary = await self._summarize(text)
            stage = self._advance(path, PipelineStage.SUMMARIZED)

            chunks = [
                Chunk(index=i, text=t)
                for i, t in enumerate(chunk_text(text, self.chunk_size, self.chunk_overlap))
            ]
            stage = self._advance(path, PipelineStage.CHUNKED)
            logger.info("Generated %d chunks from %s", len(chunks), path)

            embeddings = await self._embed(chunks)
            stage = self._advance(path, PipelineStage.EMBEDDED)

            template = DocumentMetadata(
                file_path=path,
                file_name=Path(path).name or "unknown",
                file_size=file_size,
                file_hash=file_hash,
                total_chunks=len(chunks),
                processed_at=datetime.now(timezone.utc).isoformat(),
                summary=summary,
            )
            points = build_points(chunks, embeddings, template)

            await self._store_points(points)
            stage = self._advance(path, PipelineStage.STORED)
        except IngestionError as exc:
            self._advance(path, PipelineStage.FAILED)
            logger.error(
                "Ingestion of %s failed during %s (last completed stage: %s): %s",
                path,
                exc.stage,
                stage.value,
                exc,
            )
            raise

        self._advance(path, PipelineStage.DONE)
        logger.info("Successfully processed %d chunks for %s", len(points), path)
        return IngestResult(file_path=path, chunks_processed=len(points))

    # -- stages ---------------------------------------------------------------

    async def _extract(self, path: str) -> tuple[str, int, str]:
        try:
            text = await asyncio.to_thread(self._extractor.extract, path)
            file_size, file_hash = await asyncio.to_thread(fingerprint, path)
        except IngestionError:
            raise
        except FileNotFoundError as exc:
            raise ExtractionError(
                f"File does not exist: {path}", kind=ExtractionErrorKind.NOT_FOUND, original_error=exc
            ) from exc
        except Exception as exc:
            raise ExtractionError(f"Failed to extract text from {path}", original_error=exc) from exc

        if not text.strip():
            raise EmptyContentError("No text content found in file", details={"file_path": path})
        return text, file_size, file_hash

    async def _summarize(self, text: str) -> str:
        try:
            return await self._llm.summarize(text)
        except Exception as exc:
            raise SummaryError("Failed to generate summary", original_error=exc) from exc

    async def _embed(self, chunks: list[Chunk]) -> list[list[float]]:
        embeddings: list[list[float]] = []
        for chunk in chunks:
            try:
                vector = await self._llm.embed(chunk.text)
            except Exception as exc:
                raise EmbeddingError(
                    "Failed to generate embeddings", chunk_index=chunk.index, original_error=exc
                ) from exc
            if len(vector) != self.embedding_dim:
                raise EmbeddingError(
                    f"Embedding has {len(vector)} dimensions, expected {self.embedding_dim}",
                    chunk_index=chunk.index,
                )
            embeddings.append(vector)
        return embeddings

    async def _store_points(self, points: list[StoredPoint]) -> None:
        try:
            await self._store.upsert(points)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError("Failed to store embeddings", original_error=exc) from exc

    @staticmethod
    def _advance(path: str, stage: PipelineStage) -> PipelineStage:
        logger.debug("%s -> %s", path, stage.value)
        return stage


def build_points(
    chunks: list[Chunk],
    embeddings: list[list[float]],
    template: DocumentMetadata,
) -> list[StoredPoint]:
    """Pair every chunk with its embedding under a shared metadata template.

    Raises :class:`AlignmentError` before building anything when the two
    sequences differ in length.
    """
    if len(chunks) != len(embeddings):
        raise AlignmentError(
            f"Chunks and embeddings length mismatch: {len(chunks)} vs {len(embeddings)}"
        )

    template = template.model_copy(update={"total_chunks": len(chunks)})
    return [
        StoredPoint(vector=vector, text=chunk.text, metadata=template.for_chunk(chunk.index))
        for chunk, vector in zip(chunks, embeddings)
    ]
