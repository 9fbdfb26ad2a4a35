"""PDF Renderer Port Interface."""

from abc import ABC, abstractmethod


class PdfRendererPort(ABC):
    """Lays out an HTML document as PDF pages."""

    @abstractmethod
    def render(self, html: str) -> bytes:
        """Return the PDF file bytes for ``html``."""
        ...
