"""FastAPI application exposing document ingestion as a REST API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from desk_assist.config import configure_logging, settings
from desk_assist.errors import EmbeddingError, ExtractionError, IngestionError
from desk_assist.ingestion.loader import FileExtractor
from desk_assist.ingestion.models import SearchHit
from desk_assist.ingestion.pipeline import IngestionPipeline, LanguageModel
from desk_assist.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)


# ── Request / Response schemas ────────────────────────────────────────
class IngestResponse(BaseModel):
    """Result of a successful ingestion."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    chunks_processed: int = Field(alias="chunksProcessed")


class ErrorResponse(BaseModel):
    error: str


class SearchRequest(BaseModel):
    """Free-text similarity query."""

    query: str
    limit: int = Field(default=5, ge=1, le=100)


class SearchResponse(BaseModel):
    results: list[SearchHit] = []


# ── Application factory ───────────────────────────────────────────────
def create_app(
    pipeline: IngestionPipeline | None = None,
    *,
    store: VectorStoreBase | None = None,
    llm: LanguageModel | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Collaborators that are not injected are built from ``settings`` when
    the application starts; the vector-store collection is ensured once at
    that point.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)

        app_store = store
        if app_store is None:
            from desk_assist.vectorstore.chroma_store import ChromaVectorStore

            app_store = ChromaVectorStore(
                settings.chroma_collection, host=settings.chroma_host, port=settings.chroma_port
            )
        await app_store.ensure_collection(settings.embedding_dim, settings.distance_metric)

        app_llm = llm
        if app_llm is None:
            from desk_assist.llm import LanguageModelClient

            app_llm = LanguageModelClient.from_settings(settings)

        app.state.store = app_store
        app.state.llm = app_llm
        app.state.pipeline = pipeline or IngestionPipeline(
            FileExtractor(),
            app_llm,
            app_store,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            embedding_dim=settings.embedding_dim,
        )
        yield

    app = FastAPI(
        title="DeskAssist Core",
        version="0.1.0",
        description="Document ingestion for retrieval-augmented generation.",
        lifespan=lifespan,
    )
    app.add_exception_handler(IngestionError, _ingestion_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        """Readiness probe: the vector store must answer."""
        if await request.app.state.store.health_check():
            return JSONResponse({"status": "ok"})
        return JSONResponse({"status": "unavailable"}, status_code=503)

    @app.post(
        "/ingest",
        response_model=IngestResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def ingest(
        path: str = Query(..., description="Path of the document to ingest"),
        ingestion: IngestionPipeline = Depends(_get_pipeline),
    ) -> IngestResponse:
        """Extract, summarise, chunk, embed, and store one document."""
        result = await ingestion.ingest(path)
        return IngestResponse(
            message=f"Successfully processed {result.chunks_processed} chunks",
            chunks_processed=result.chunks_processed,
        )

    @app.post(
        "/search",
        response_model=SearchResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def search(body: SearchRequest, request: Request) -> SearchResponse:
        """Embed *query* and return the closest stored chunks."""
        try:
            vector = await request.app.state.llm.embed(body.query)
        except Exception as exc:
            raise EmbeddingError("Failed to embed query", original_error=exc) from exc
        hits = await request.app.state.store.similarity_search(vector, k=body.limit)
        return SearchResponse(results=hits)

    return app


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.warning("%s %s rejected: %s", request.method, request.url.path, problems)
    return JSONResponse(ErrorResponse(error=f"Invalid request: {problems}").model_dump(), status_code=400)


def _get_pipeline(request: Request) -> IngestionPipeline:
    return request.app.state.pipeline


async def _ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    message = str(exc)
    if isinstance(exc, ExtractionError):
        message = f"Failed to extract text: {message}"
    logger.error("%s %s failed during %s: %s", request.method, request.url.path, exc.stage, exc)
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=exc.status_code)


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    configure_logging(settings.log_level)
    logger.info("DeskAssist Core server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)
