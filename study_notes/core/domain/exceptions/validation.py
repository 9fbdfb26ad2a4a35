"""Validation exceptions for AI Study Notes."""

from .base import StudyNotesError


class ValidationError(StudyNotesError):
    """Input validation failed."""

    error_code = "SN_VAL_001"


class EmptyQuestionError(ValidationError):
    """Chat question cannot be empty or whitespace only."""

    error_code = "SN_VAL_002"


class InvalidChunkingError(ValidationError, ValueError):
    """Chunk size/overlap combination would never terminate."""

    error_code = "SN_VAL_003"


class UploadValidationError(ValidationError):
    """Upload request is malformed (no files, too many files, file too large)."""

    error_code = "SN_VAL_004"
