"""Text extraction exceptions for AI Study Notes."""

from .base import StudyNotesError


class ExtractionError(StudyNotesError):
    """Failed to extract text from an uploaded file.

    Scoped to a single file: upload batches collect these and move on.
    """

    error_code = "SN_EXT_001"


class PDFExtractionError(ExtractionError):
    """Every PDF parsing strategy failed."""

    error_code = "SN_EXT_002"


class DOCXExtractionError(ExtractionError):
    """DOCX file could not be read or held no text."""

    error_code = "SN_EXT_003"


class UnsupportedFileTypeError(ExtractionError):
    """File type is not one the extractor understands."""

    error_code = "SN_EXT_004"


class NoTextExtractedError(ExtractionError):
    """No file in an upload batch produced usable text."""

    error_code = "SN_EXT_005"
