"""PDF text extraction with PyMuPDF."""

import logging

import fitz  # PyMuPDF

from ....core.domain.exceptions import PDFExtractionError
from ....core.ports import TextParserPort
from .pypdf_parser import PAGE_SEPARATOR

logger = logging.getLogger(__name__)


class PyMuPDFParser(TextParserPort):
    """Reads page text with PyMuPDF; tolerant of PDFs pypdf rejects."""

    name = "pymupdf"

    def try_extract(self, content: bytes) -> str:
        doc = fitz.open(stream=content, filetype="pdf")
        try:
            if doc.page_count == 0:
                raise PDFExtractionError("Empty PDF: 0 pages found")
            pages = [doc.load_page(i).get_text("text") for i in range(doc.page_count)]
        finally:
            doc.close()

        logger.debug("pymupdf read %d pages", len(pages))
        text = PAGE_SEPARATOR.join(pages).strip()
        if not text:
            raise PDFExtractionError("PDF appears to be empty or contains no extractable text")
        return text
