"""Pure helpers shared by the pipeline: text cleanup, chunking, similarity."""

import math
from collections.abc import Sequence

from .document import Chunk
from .exceptions import InvalidChunkingError


def clean_text(text: str) -> str:
    """Strip BOM markers and surrounding whitespace from user input."""
    if not text:
        return ""
    return text.replace("\ufeff", "").strip()


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[Chunk]:
    """Split text into fixed-size character windows that overlap.

    Each window starts ``chunk_size - chunk_overlap`` characters after the
    previous one. The final window may be shorter and always ends at
    ``len(text)``. Slicing is on raw character offsets: no trimming or
    sentence detection.

    Args:
        text: Text to chunk.
        chunk_size: Window length in characters (must be positive).
        chunk_overlap: Characters shared by consecutive windows
            (must be less than chunk_size).

    Returns:
        Chunks in offset order; empty for empty text.

    Raises:
        InvalidChunkingError: If the parameters would never advance.
    """
    if chunk_size <= 0:
        raise InvalidChunkingError("chunk_size must be positive", context={"chunk_size": chunk_size})
    if chunk_overlap < 0:
        raise InvalidChunkingError(
            "chunk_overlap must be non-negative", context={"chunk_overlap": chunk_overlap}
        )
    if chunk_overlap >= chunk_size:
        raise InvalidChunkingError(
            "chunk_overlap must be less than chunk_size to avoid infinite loop",
            context={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        )

    chunks: list[Chunk] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(Chunk(content=text[start:end], start=start, end=end))
        next_start = end - chunk_overlap
        if next_start <= start:
            break
        start = next_start
    return chunks


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 instead of NaN when either vector is empty or all zeros, and
    when the lengths differ (vectors from different embedding spaces).
    """
    if not a or not b or len(a) != len(b):
        return 0.0

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
