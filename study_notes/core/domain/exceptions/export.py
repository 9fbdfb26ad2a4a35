"""Export-related exceptions for AI Study Notes."""

from .base import StudyNotesError


class ExportError(StudyNotesError):
    """Base exception for exporting chat content."""

    error_code = "SN_EXP_001"


class PDFRenderError(ExportError):
    """HTML could not be laid out as a PDF."""

    error_code = "SN_EXP_002"
