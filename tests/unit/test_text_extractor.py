"""Unit tests for text extraction and the parser strategies."""

import logging

import pytest

from fakes import StubParser
from study_notes.adapters.outbound.parsers import DocxParser, PyMuPDFParser, PypdfParser
from study_notes.core.domain.exceptions import (
    DOCXExtractionError,
    PDFExtractionError,
    UnsupportedFileTypeError,
)
from study_notes.core.services.text_extractor import (
    DOCX_TYPE,
    PDF_TYPE,
    PPTX_TYPE,
    TextExtractor,
    legacy_doc_placeholder,
    powerpoint_placeholder,
)

pytestmark = pytest.mark.unit


def _extractor(*pdf_parsers, docx=None):
    return TextExtractor(list(pdf_parsers), docx or StubParser("docx", text="docx text"))


class TestPdfFallbackChain:
    """PDF parsers are tried in order until one yields text."""

    def test_first_parser_wins(self):
        primary = StubParser("primary", text="from primary")
        secondary = StubParser("secondary", text="from secondary")

        assert _extractor(primary, secondary).extract(b"%PDF", PDF_TYPE, "a.pdf") == "from primary"
        assert secondary.calls == 0

    def test_falls_back_when_primary_raises(self, caplog):
        primary = StubParser("primary", error=ValueError("bad xref table"))
        secondary = StubParser("secondary", text="page text")

        with caplog.at_level(logging.WARNING):
            text = _extractor(primary, secondary).extract(b"%PDF", PDF_TYPE, "a.pdf")

        assert text == "page text"
        assert "primary" in caplog.text

    def test_falls_back_when_primary_returns_blank(self):
        primary = StubParser("primary", text="   \n ")
        secondary = StubParser("secondary", text="real text")

        assert _extractor(primary, secondary).extract(b"%PDF", PDF_TYPE, "a.pdf") == "real text"

    def test_all_parsers_fail_reports_last_error(self):
        primary = StubParser("primary", error=ValueError("first problem"))
        secondary = StubParser("secondary", error=PDFExtractionError("Empty PDF: 0 pages found"))

        with pytest.raises(PDFExtractionError) as exc_info:
            _extractor(primary, secondary).extract(b"%PDF", PDF_TYPE, "a.pdf")

        assert exc_info.value.message == "Failed to parse PDF: Empty PDF: 0 pages found"
        assert exc_info.value.extra_context["parsers"] == ["primary", "secondary"]

    def test_requires_a_pdf_parser(self):
        with pytest.raises(ValueError):
            TextExtractor([], StubParser("docx"))


class TestDispatch:
    """MIME type first, extension second."""

    def test_pdf_by_extension_without_type(self):
        parser = StubParser("pdf", text="pdf text")
        assert _extractor(parser).extract(b"%PDF", "", "Lecture.PDF") == "pdf text"

    def test_docx(self):
        extractor = _extractor(StubParser("pdf"), docx=StubParser("docx", text="word text"))
        assert extractor.extract(b"PK", DOCX_TYPE, "notes.docx") == "word text"

    def test_powerpoint_placeholder(self):
        text = _extractor(StubParser("pdf")).extract(b"PK", PPTX_TYPE, "slides.pptx")

        assert text == powerpoint_placeholder("slides.pptx")
        assert text.startswith("[PowerPoint file: slides.pptx]")

    def test_legacy_doc_placeholder(self):
        text = _extractor(StubParser("pdf")).extract(b"\xd0\xcf", "application/msword", "old.doc")

        assert text == legacy_doc_placeholder("old.doc")
        assert "convert to .docx" in text

    def test_plain_text_decodes_utf8_with_replacement(self):
        text = _extractor(StubParser("pdf")).extract("caf\u00e9 \xff".encode("latin-1"), "text/plain", "a.txt")

        assert text.startswith("caf")
        assert "\ufffd" in text

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            _extractor(StubParser("pdf")).extract(b"\x00\x01", "application/octet-stream", "blob.bin")

        assert exc_info.value.message == (
            "Unsupported file type: application/octet-stream. Supported: PDF, DOCX, PPTX, TXT"
        )


class TestRealParsers:
    """The library-backed strategies on generated documents."""

    def test_pymupdf_reads_generated_pdf(self, pdf_bytes):
        assert "Photosynthesis" in PyMuPDFParser().try_extract(pdf_bytes)

    def test_pymupdf_logs_page_count(self, pdf_bytes, caplog):
        with caplog.at_level(logging.DEBUG, logger="study_notes"):
            PyMuPDFParser().try_extract(pdf_bytes)

        assert "pymupdf read" in caplog.text

    def test_pypdf_reads_generated_pdf(self, pdf_bytes):
        assert "Photosynthesis" in PypdfParser().try_extract(pdf_bytes)

    def test_extractor_with_real_chain(self, pdf_bytes):
        extractor = TextExtractor([PypdfParser(), PyMuPDFParser()], DocxParser())

        assert "chemical energy" in extractor.extract(pdf_bytes, PDF_TYPE, "bio.pdf")

    def test_garbage_pdf_fails_both_parsers(self):
        extractor = TextExtractor([PypdfParser(), PyMuPDFParser()], DocxParser())

        with pytest.raises(PDFExtractionError) as exc_info:
            extractor.extract(b"this is not a pdf", PDF_TYPE, "broken.pdf")
        assert exc_info.value.message.startswith("Failed to parse PDF: ")

    def test_docx_paragraphs_and_tables(self, docx_bytes):
        text = DocxParser().try_extract(docx_bytes)

        assert "Cell Biology" in text
        assert "Mitochondria are the powerhouse of the cell." in text
        assert "Organelle" in text and "Function" in text

    def test_docx_garbage_raises(self):
        with pytest.raises(DOCXExtractionError):
            DocxParser().try_extract(b"not a zip archive")
