"""Embedding exceptions for AI Study Notes."""

from .base import StudyNotesError


class EmbeddingError(StudyNotesError):
    """Failed to generate embeddings."""

    error_code = "SN_EMB_001"


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned an error or an unexpected body."""

    error_code = "SN_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded."""

    error_code = "SN_EMB_003"
