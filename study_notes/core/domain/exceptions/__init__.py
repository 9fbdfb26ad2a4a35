"""Custom exception hierarchy for AI Study Notes.

All exceptions share a structured base that records an error code, the raise
location, an optional cause, and extra context. Import from this package:

    from study_notes.core.domain.exceptions import StudyNotesError, PDFExtractionError
"""

from .backend import (
    AuthenticationError,
    BackendError,
    BackendQueryError,
    NotFoundError,
    StorageUploadError,
)
from .base import ExceptionContext, StudyNotesError
from .configuration import (
    ConfigurationError,
    MissingAPIKeyError,
)
from .embedding import (
    EmbeddingAPIError,
    EmbeddingError,
    EmbeddingRateLimitError,
)
from .export import ExportError, PDFRenderError
from .extraction import (
    DOCXExtractionError,
    ExtractionError,
    NoTextExtractedError,
    PDFExtractionError,
    UnsupportedFileTypeError,
)
from .llm import (
    LLMConnectionError,
    LLMError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMUpstreamError,
)
from .validation import (
    EmptyQuestionError,
    InvalidChunkingError,
    UploadValidationError,
    ValidationError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "StudyNotesError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    # Validation
    "ValidationError",
    "EmptyQuestionError",
    "InvalidChunkingError",
    "UploadValidationError",
    # Extraction
    "ExtractionError",
    "PDFExtractionError",
    "DOCXExtractionError",
    "UnsupportedFileTypeError",
    "NoTextExtractedError",
    # Export
    "ExportError",
    "PDFRenderError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmbeddingRateLimitError",
    # LLM
    "LLMError",
    "LLMConnectionError",
    "LLMUpstreamError",
    "LLMRateLimitError",
    "LLMGenerationError",
    # Backend
    "BackendError",
    "AuthenticationError",
    "BackendQueryError",
    "StorageUploadError",
    "NotFoundError",
]
