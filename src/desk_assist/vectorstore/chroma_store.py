"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import chromadb

from desk_assist.config import settings
from desk_assist.errors import StoreError
from desk_assist.ingestion.models import DocumentMetadata, SearchHit, StoredPoint
from desk_assist.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)

# Collection-metadata key recording the vector length the collection was created for.
DIMENSION_KEY = "embedding_dim"


def _score(distance: float, metric: str) -> float:
    """Convert a Chroma distance to a similarity score (higher = closer)."""
    if metric == "cosine":
        return 1.0 - distance
    return 1.0 / (1.0 + distance)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    The synchronous ``chromadb`` client runs in a worker thread so callers
    on the event loop are never blocked.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built Chroma client; when given, *host* and *port* are ignored.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any = None,
    ) -> None:
        super().__init__(collection_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._collection: Any = None
        self._dim: int | None = None
        self._distance = "cosine"

    # -- VectorStoreBase overrides --------------------------------------------

    async def ensure_collection(self, dim: int, distance: str = "cosine") -> None:
        try:
            collection = await asyncio.to_thread(
                self._client.get_or_create_collection,
                name=self.collection_name,
                metadata={"hnsw:space": distance, DIMENSION_KEY: dim},
            )
        except Exception as exc:
            raise StoreError(
                f"Failed to ensure collection {self.collection_name!r}", original_error=exc
            ) from exc

        existing = (collection.metadata or {}).get(DIMENSION_KEY)
        if existing is not None and existing != dim:
            raise StoreError(
                f"Collection {self.collection_name!r} holds {existing}-dimensional vectors, "
                f"expected {dim}"
            )

        self._collection = collection
        self._dim = dim
        self._distance = (collection.metadata or {}).get("hnsw:space", distance)
        logger.info("Collection ready: %s (dim=%d, distance=%s)", self.collection_name, dim, self._distance)

    async def upsert(self, points: list[StoredPoint]) -> None:
        if self._collection is None:
            raise StoreError(f"Collection {self.collection_name!r} has not been ensured")
        if not points:
            return

        for point in points:
            if len(point.vector) != self._dim:
                raise StoreError(
                    f"Vector for point {point.id} has {len(point.vector)} dimensions, expected {self._dim}"
                )

        try:
            await asyncio.to_thread(
                self._collection.upsert,
                ids=[p.id for p in points],
                embeddings=[p.vector for p in points],
                documents=[p.text for p in points],
                # Chroma metadata values must be flat str/int/float/bool.
                metadatas=[p.metadata.model_dump() for p in points],
            )
        except Exception as exc:
            raise StoreError(
                f"Failed to upsert {len(points)} points into {self.collection_name!r}",
                original_error=exc,
            ) from exc

        logger.info("Upserted %d points into %s", len(points), self.collection_name)

    async def similarity_search(self, query_embedding: list[float], *, k: int = 5) -> list[SearchHit]:
        if self._collection is None:
            raise StoreError(f"Collection {self.collection_name!r} has not been ensured")

        try:
            results = await asyncio.to_thread(
                self._collection.query,
                query_embeddings=[query_embedding],
                n_results=k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise StoreError(f"Search in {self.collection_name!r} failed", original_error=exc) from exc

        ids = results.get("ids", [[]])[0]
        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        hits: list[SearchHit] = []
        for point_id, content, meta, dist in zip(ids, docs, metas, distances):
            hits.append(
                SearchHit(
                    id=point_id,
                    text=content or "",
                    score=_score(dist, self._distance),
                    metadata=DocumentMetadata.model_validate(meta or {}),
                )
            )
        return hits

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._client.heartbeat)
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
