"""
Ingestion — document loading, chunking, embedding, and storage.

This module is responsible for the pipeline that converts a raw document
(PDF, Markdown, HTML, plain text) into embedded chunks stored in a vector
database.

Public surface
--------------
- :func:`chunk_text` — boundary-aware, overlapping text chunker.
- :func:`extract_text` — file-extension based text extraction.
- :class:`IngestionPipeline` — the stage-by-stage orchestrator.
"""

from desk_assist.ingestion.chunker import chunk_text
from desk_assist.ingestion.loader import FileExtractor, extract_text
from desk_assist.ingestion.pipeline import IngestionPipeline

__all__ = [
    "FileExtractor",
    "IngestionPipeline",
    "chunk_text",
    "extract_text",
]
