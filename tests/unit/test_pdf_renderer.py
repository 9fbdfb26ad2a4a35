"""Unit tests for HTML to PDF rendering."""

import fitz
import pytest

from study_notes.adapters.outbound.export.pymupdf_renderer import MM_TO_POINTS, PyMuPDFRenderer

pytestmark = pytest.mark.unit

HTML = "<h1>Mitosis</h1><p>Prophase, metaphase, anaphase and telophase.</p>"


class TestPyMuPDFRenderer:
    def test_renders_a4_pdf_with_text(self):
        pdf = PyMuPDFRenderer().render(HTML)

        assert pdf.startswith(b"%PDF")
        doc = fitz.open(stream=pdf, filetype="pdf")
        try:
            page = doc.load_page(0)
            assert round(page.rect.width) == 595
            assert round(page.rect.height) == 842
            assert "metaphase" in page.get_text("text")
        finally:
            doc.close()

    def test_margins(self):
        renderer = PyMuPDFRenderer(margin_mm=25.0)

        assert renderer.content_rect.x0 == pytest.approx(25 * MM_TO_POINTS)
        assert renderer.content_rect.y1 == pytest.approx(renderer.mediabox.y1 - 25 * MM_TO_POINTS)

    def test_long_content_flows_onto_more_pages(self):
        html = "".join(f"<p>Paragraph {i} about cell division.</p>" for i in range(300))

        doc = fitz.open(stream=PyMuPDFRenderer().render(html), filetype="pdf")
        try:
            assert doc.page_count > 1
        finally:
            doc.close()
