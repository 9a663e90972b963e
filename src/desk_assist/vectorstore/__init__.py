"""
Vector store — persistence and similarity search for embedded chunks.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend (subclass for Qdrant, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
"""

from desk_assist.vectorstore.base import VectorStoreBase

__all__ = [
    "ChromaVectorStore",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from desk_assist.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
