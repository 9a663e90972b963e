"""Document loaders — turn a file on disk into plain text.

Plain text and Markdown are read as-is, PDFs go through LangChain's
``PyPDFLoader`` and HTML is stripped to its visible text with BeautifulSoup.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from bs4 import BeautifulSoup
from langchain_community.document_loaders import PyPDFLoader, TextLoader

from desk_assist.errors import ExtractionError, ExtractionErrorKind

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".txt", ".md", ".pdf", ".html", ".htm"})

# Tags whose text is never part of the readable document body.
_HTML_BOILERPLATE = ["script", "style", "noscript", "iframe"]


def load_text(path: str | Path) -> str:
    """Load a plain-text or Markdown file."""
    docs = TextLoader(str(path), encoding="utf-8").load()
    return "".join(doc.page_content for doc in docs)


def load_pdf(path: str | Path) -> str:
    """Load a PDF, one page per line block."""
    pages = PyPDFLoader(str(path)).load()
    text = "".join(f"{page.page_content}\n" for page in pages)
    if not text.strip():
        raise ExtractionError(
            f"No text extracted from PDF: {path}",
            kind=ExtractionErrorKind.PARSE_FAILURE,
        )
    return text


def load_html(path: str | Path) -> str:
    """Load an HTML file and return its visible text."""
    raw = Path(path).read_text(encoding="utf-8", errors="replace")
    soup = BeautifulSoup(raw, "html.parser")
    for tag in soup(_HTML_BOILERPLATE):
        tag.decompose()
    return soup.get_text(separator="\n", strip=True)


_LOADERS = {
    ".txt": load_text,
    ".md": load_text,
    ".pdf": load_pdf,
    ".html": load_html,
    ".htm": load_html,
}


def extract_text(path: str | Path) -> str:
    """Extract the text of the document at *path*, dispatching on its extension.

    Raises
    ------
    ExtractionError
        ``NOT_FOUND`` when *path* does not exist, ``UNSUPPORTED_TYPE`` for
        extensions outside :data:`SUPPORTED_EXTENSIONS`, ``PARSE_FAILURE``
        when the underlying parser fails.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ExtractionError(f"File does not exist: {path}", kind=ExtractionErrorKind.NOT_FOUND)

    extension = file_path.suffix.lower()
    loader = _LOADERS.get(extension)
    if loader is None:
        raise ExtractionError(
            f"Unsupported file type: {extension.lstrip('.') or '<none>'}",
            kind=ExtractionErrorKind.UNSUPPORTED_TYPE,
        )

    try:
        text = loader(file_path)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(
            f"Failed to parse {file_path.name}",
            kind=ExtractionErrorKind.PARSE_FAILURE,
            original_error=exc,
        ) from exc

    logger.debug("Extracted %d chars from %s", len(text), path)
    return text


def fingerprint(path: str | Path) -> tuple[int, str]:
    """Return ``(size_in_bytes, sha256_hex)`` of the file at *path*."""
    content = Path(path).read_bytes()
    return len(content), hashlib.sha256(content).hexdigest()


class FileExtractor:
    """Extraction capability backed by the local filesystem."""

    def extract(self, path: str) -> str:
        return extract_text(path)
