"""Text extraction from uploaded documents.

Dispatches on the declared MIME type first and the file extension second.
PDFs go through an ordered list of parser strategies; the first one that
returns text wins.
"""

import logging

from ..domain.exceptions import (
    ExtractionError,
    PDFExtractionError,
    UnsupportedFileTypeError,
)
from ..ports import TextParserPort

logger = logging.getLogger(__name__)

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
PPT_TYPE = "application/vnd.ms-powerpoint"
DOC_TYPE = "application/msword"
TEXT_TYPE = "text/plain"


def powerpoint_placeholder(file_name: str) -> str:
    """Stand-in text for slide decks, which are not parsed."""
    return (
        f"[PowerPoint file: {file_name}]\n\n"
        "Note: Full text extraction from PowerPoint files requires additional processing. "
        "The file has been uploaded but detailed text extraction is not available for this format."
    )


def legacy_doc_placeholder(file_name: str) -> str:
    """Stand-in text for legacy binary .doc files."""
    return (
        f"[Word Document: {file_name}]\n\n"
        "Note: Old .doc format is not fully supported. "
        "Please convert to .docx for better text extraction."
    )


class TextExtractor:
    """Converts uploaded file bytes into plain text."""

    def __init__(
        self,
        pdf_parsers: list[TextParserPort],
        docx_parser: TextParserPort,
    ) -> None:
        """Initialize the extractor.

        Args:
            pdf_parsers: PDF strategies in the order they should be tried.
            docx_parser: Parser for Office Open XML word documents.
        """
        if not pdf_parsers:
            raise ValueError("At least one PDF parser is required")
        self.pdf_parsers = list(pdf_parsers)
        self.docx_parser = docx_parser

    def extract(self, content: bytes, content_type: str, file_name: str) -> str:
        """Extract text from one file.

        Args:
            content: Raw file bytes.
            content_type: MIME type declared by the client.
            file_name: Original file name (used for extension fallback and
                placeholder text).

        Returns:
            Extracted text. Slide decks and legacy .doc files yield a
            placeholder that downstream steps treat as normal text.

        Raises:
            ExtractionError: If the file cannot be read or its type is unknown.
        """
        mime = (content_type or "").lower()
        name = file_name.lower()
        logger.info("Extracting text from %s (%s)", file_name, mime or "no type")

        if mime == PDF_TYPE or name.endswith(".pdf"):
            return self._extract_pdf(content, file_name)

        if mime == DOCX_TYPE or name.endswith(".docx"):
            return self.docx_parser.try_extract(content)

        if mime in (PPTX_TYPE, PPT_TYPE) or name.endswith((".pptx", ".ppt")):
            return powerpoint_placeholder(file_name)

        if mime == DOC_TYPE or name.endswith(".doc"):
            return legacy_doc_placeholder(file_name)

        if mime == TEXT_TYPE or name.endswith(".txt"):
            return content.decode("utf-8", errors="replace")

        raise UnsupportedFileTypeError(
            f"Unsupported file type: {content_type or 'unknown'}. Supported: PDF, DOCX, PPTX, TXT",
            context={"file_name": file_name, "content_type": content_type},
        )

    def _extract_pdf(self, content: bytes, file_name: str) -> str:
        last_error = "no parser attempted"
        for parser in self.pdf_parsers:
            try:
                text = parser.try_extract(content)
            except Exception as e:
                last_error = e.message if isinstance(e, ExtractionError) else str(e)
                logger.warning("PDF parser %s failed for %s: %s", parser.name, file_name, last_error)
                continue

            if text and text.strip():
                logger.info(
                    "Extracted %d characters from %s with %s", len(text), file_name, parser.name
                )
                return text
            last_error = "PDF appears to be empty or contains no extractable text"
            logger.warning("PDF parser %s returned no text for %s", parser.name, file_name)

        raise PDFExtractionError(
            f"Failed to parse PDF: {last_error}",
            context={"file_name": file_name, "parsers": [p.name for p in self.pdf_parsers]},
        )
