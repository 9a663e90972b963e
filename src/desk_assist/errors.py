"""Error taxonomy for the ingestion service.

Every stage of the ingestion pipeline fails with its own exception type so
callers can branch on the kind of failure instead of parsing messages.

Hierarchy
---------
::

    DeskAssistError
    └── IngestionError              (carries ``stage`` and ``status_code``)
        ├── ExtractionError         400  kind: NOT_FOUND | UNSUPPORTED_TYPE | PARSE_FAILURE
        ├── EmptyContentError       400
        ├── SummaryError            500
        ├── EmbeddingError          500
        ├── AlignmentError          500
        └── StoreError              500

Usage::

    try:
        result = await pipeline.ingest(path)
    except ExtractionError as e:
        if e.kind is ExtractionErrorKind.UNSUPPORTED_TYPE:
            ...
    except IngestionError as e:
        logger.error("Ingestion failed at %s: %s", e.stage, e)
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class DeskAssistError(Exception):
    """Base exception for all desk-assist errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error (optional)
        original_error: The underlying exception that caused this error (optional)
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base = self.message
        if self.original_error is not None:
            base += f": {self.original_error}"
        return base


class IngestionError(DeskAssistError):
    """A terminal failure of one ingestion run.

    ``stage`` names the pipeline stage that failed and ``status_code`` is the
    HTTP status the serving layer answers with.
    """

    stage: str = "unknown"
    status_code: int = 500


class ExtractionErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UNSUPPORTED_TYPE = "unsupported_type"
    PARSE_FAILURE = "parse_failure"


class ExtractionError(IngestionError):
    """Text could not be extracted from the requested file."""

    stage = "extract"
    status_code = 400

    def __init__(
        self,
        message: str,
        kind: ExtractionErrorKind = ExtractionErrorKind.PARSE_FAILURE,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, details=details, original_error=original_error)
        self.kind = kind


class EmptyContentError(IngestionError):
    """Extraction succeeded but produced no text."""

    stage = "extract"
    status_code = 400


class SummaryError(IngestionError):
    stage = "summarize"


class EmbeddingError(IngestionError):
    """Embedding a chunk failed; ``chunk_index`` is the chunk that failed, if known."""

    stage = "embed"

    def __init__(
        self,
        message: str,
        chunk_index: int | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, details=details, original_error=original_error)
        self.chunk_index = chunk_index


class AlignmentError(IngestionError):
    """Chunk and embedding counts disagree; no point may be built."""

    stage = "assemble"


class StoreError(IngestionError):
    stage = "store"
