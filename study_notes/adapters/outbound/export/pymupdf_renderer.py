"""HTML to PDF rendering with PyMuPDF's Story layout engine."""

import io
import logging

import fitz  # PyMuPDF

from ....core.domain.exceptions import PDFRenderError
from ....core.ports import PdfRendererPort

logger = logging.getLogger(__name__)

MM_TO_POINTS = 72 / 25.4


class PyMuPDFRenderer(PdfRendererPort):
    """Flows HTML across as many pages as it needs."""

    def __init__(self, paper: str = "a4", margin_mm: float = 25.0) -> None:
        """Initialize the renderer.

        Args:
            paper: Paper size name understood by ``fitz.paper_rect``.
            margin_mm: Margin on every side, in millimetres.
        """
        self.mediabox = fitz.paper_rect(paper)
        margin = margin_mm * MM_TO_POINTS
        self.content_rect = self.mediabox + (margin, margin, -margin, -margin)

    def render(self, html: str) -> bytes:
        buffer = io.BytesIO()
        try:
            story = fitz.Story(html=html)
            writer = fitz.DocumentWriter(buffer)
            pages = 0
            more = 1
            while more:
                device = writer.begin_page(self.mediabox)
                more, _ = story.place(self.content_rect)
                story.draw(device)
                writer.end_page()
                pages += 1
            writer.close()
        except Exception as e:
            raise PDFRenderError(f"Failed to generate PDF: {e}", cause=e) from e

        logger.debug("Rendered HTML export to %d PDF pages", pages)
        return buffer.getvalue()
