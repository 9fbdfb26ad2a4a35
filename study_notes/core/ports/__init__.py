"""Ports (abstract interfaces) the core services depend on."""

from .backend_port import BackendPort
from .embedding_port import EmbeddingPort
from .llm_port import LLMPort
from .pdf_renderer_port import PdfRendererPort
from .text_parser_port import TextParserPort

__all__ = ["BackendPort", "EmbeddingPort", "LLMPort", "PdfRendererPort", "TextParserPort"]
