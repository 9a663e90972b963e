"""Abstract base class for vector-store backends.

Adding a new backend (Qdrant, Pinecone, Weaviate …) only requires
subclassing :class:`VectorStoreBase` and implementing the abstract
methods.  The ingestion pipeline is backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from desk_assist.ingestion.models import SearchHit, StoredPoint


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def ensure_collection(self, dim: int, distance: str = "cosine") -> None:
        """Create the collection if it does not exist yet.

        Must be idempotent; it is called once at application startup.

        Parameters
        ----------
        dim:
            Dimensionality of every vector stored in the collection.
        distance:
            Distance function (``cosine`` | ``l2`` | ``ip``).
        """
        ...

    @abstractmethod
    async def upsert(self, points: list[StoredPoint]) -> None:
        """Write *points* in a single batch.

        Raises :class:`~desk_assist.errors.StoreError` on failure.
        """
        ...

    @abstractmethod
    async def similarity_search(self, query_embedding: list[float], *, k: int = 5) -> list[SearchHit]:
        """Return the top-*k* stored chunks closest to *query_embedding*.

        Results are ordered by descending ``score`` (higher = more similar).
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
