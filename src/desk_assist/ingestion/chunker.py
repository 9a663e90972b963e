"""Boundary-aware text chunking with overlap."""

from __future__ import annotations

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

SENTENCE_ENDINGS = frozenset(".!?")


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split *text* into overlapping chunks of at most *chunk_size* characters.

    Text that already fits is returned untouched as a single chunk. Longer
    text is cut with a sliding window whose cut point snaps back to the last
    sentence ending (``.``, ``!``, ``?``) or, failing that, the last
    whitespace inside the window. Consecutive windows share roughly
    *chunk_overlap* characters.

    Parameters
    ----------
    text:
        Full document text.
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of characters each window steps back from the previous cut.

    Returns
    -------
    list[str]
        Chunks in document order. Windowed chunks are whitespace-trimmed
        and never empty.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if not 0 <= chunk_overlap < chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
        )

    if len(text) <= chunk_size:
        return [text]

    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        cut = end

        if end < len(text):
            window = text[start:end]
            boundary = _find_sentence_boundary(window)
            if boundary is None:
                boundary = _find_word_boundary(window)
            if boundary is not None:
                cut = start + boundary

        chunk = text[start:cut].strip()
        if chunk:
            chunks.append(chunk)

        if cut >= len(text):
            break

        next_start = cut - chunk_overlap if cut > chunk_overlap else cut
        # Snapping can land close enough to `start` that stepping back by the
        # overlap would revisit it.
        if next_start <= start:
            next_start = cut
        start = next_start

    return chunks


def _find_sentence_boundary(window: str) -> int | None:
    """Offset just past the last sentence ending that still has text after it."""
    for pos in range(len(window) - 2, -1, -1):
        if window[pos] in SENTENCE_ENDINGS:
            return pos + 1
    return None


def _find_word_boundary(window: str) -> int | None:
    """Offset of the last whitespace character, ignoring one at the very start."""
    for pos in range(len(window) - 1, 0, -1):
        if window[pos].isspace():
            return pos
    return None
