"""PDF text extraction with pypdf."""

import io
import logging

from pypdf import PdfReader

from ....core.domain.exceptions import PDFExtractionError
from ....core.ports import TextParserPort

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


class PypdfParser(TextParserPort):
    """Reads the text layer of every page with pypdf."""

    name = "pypdf"

    def try_extract(self, content: bytes) -> str:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted:
            # Many "encrypted" PDFs only carry an owner password
            reader.decrypt("")

        pages = [page.extract_text() or "" for page in reader.pages]
        logger.debug("pypdf read %d pages", len(pages))

        text = PAGE_SEPARATOR.join(pages).strip()
        if not text:
            raise PDFExtractionError("PDF appears to be empty or contains no extractable text")
        return text
