"""Document parser strategies backed by third-party libraries."""

from .docx_parser import DocxParser
from .pymupdf_parser import PyMuPDFParser
from .pypdf_parser import PypdfParser

__all__ = ["DocxParser", "PyMuPDFParser", "PypdfParser"]
