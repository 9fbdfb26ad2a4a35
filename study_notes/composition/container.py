"""Composition root wiring adapters to the application services.

Provider-facing components are process-wide singletons. Anything that touches
the backend is built per request around a backend bound to the caller's token.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.backend.supabase_rest_adapter import SupabaseRestAdapter
from ..adapters.outbound.embeddings.openai_adapter import OpenAIEmbeddingAdapter
from ..adapters.outbound.export.pymupdf_renderer import PyMuPDFRenderer
from ..adapters.outbound.llm.openrouter_adapter import OpenRouterAdapter
from ..adapters.outbound.parsers import DocxParser, PyMuPDFParser, PypdfParser
from ..config import settings
from ..core.domain.exceptions import ConfigurationError
from ..core.ports import BackendPort
from ..core.services.chat_service import ChatService
from ..core.services.chat_streamer import ChatStreamer
from ..core.services.conversation_service import ConversationService
from ..core.services.embedding_service import EmbeddingProvider
from ..core.services.note_generator import NoteGenerator
from ..core.services.retrieval_service import RetrievalService
from ..core.services.text_extractor import TextExtractor
from ..core.services.upload_service import UploadService

logger = logging.getLogger(__name__)


@lru_cache
def get_text_extractor() -> TextExtractor:
    logger.info("Initializing TextExtractor (pypdf -> pymupdf)...")
    return TextExtractor(
        pdf_parsers=[PypdfParser(), PyMuPDFParser()],
        docx_parser=DocxParser(),
    )


@lru_cache
def get_llm() -> OpenRouterAdapter:
    logger.info("Initializing OpenRouterAdapter (model=%s)...", settings.chat_model)
    return OpenRouterAdapter(
        api_key=settings.openrouter_api_key,
        model=settings.chat_model,
        base_url=settings.openrouter_base_url,
        site_url=settings.site_url,
        app_title=settings.app_title,
        timeout=settings.request_timeout,
        stream_read_timeout=settings.stream_read_timeout,
    )


@lru_cache
def get_embedding_provider() -> EmbeddingProvider:
    api_key = settings.effective_openai_api_key
    if not api_key:
        logger.info("OPENAI_API_KEY not set; embeddings use the synthetic fallback")
        return EmbeddingProvider(remote=None)
    logger.info("Initializing OpenAIEmbeddingAdapter (model=%s)...", settings.embedding_model)
    return EmbeddingProvider(
        remote=OpenAIEmbeddingAdapter(
            api_key=api_key,
            model=settings.embedding_model,
            base_url=settings.openai_base_url,
            timeout=settings.request_timeout,
        )
    )


@lru_cache
def get_note_generator() -> NoteGenerator:
    return NoteGenerator(
        get_llm(),
        input_limit=settings.notes_input_limit,
        temperature=settings.notes_temperature,
        max_tokens=settings.notes_max_tokens,
    )


@lru_cache
def get_chat_streamer() -> ChatStreamer:
    return ChatStreamer(get_llm(), error_word_delay=settings.error_word_delay)


@lru_cache
def get_pdf_renderer() -> PyMuPDFRenderer:
    return PyMuPDFRenderer(paper="a4", margin_mm=25.0)


def create_backend(access_token: str | None) -> SupabaseRestAdapter:
    """Backend client bound to one caller's access token."""
    if not settings.backend_configured:
        raise ConfigurationError(
            "Missing Supabase configuration",
            context={"required": ["SUPABASE_URL", "SUPABASE_ANON_KEY"]},
        )
    return SupabaseRestAdapter(
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        access_token=access_token,
        timeout=settings.request_timeout,
    )


def build_upload_service(backend: BackendPort) -> UploadService:
    return UploadService(
        backend,
        get_text_extractor(),
        get_note_generator(),
        get_embedding_provider() if settings.embed_chunks_on_upload else None,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        max_files=settings.max_files,
        max_file_size=settings.max_file_size,
        max_combined_text_length=settings.max_combined_text_length,
        storage_bucket=settings.storage_bucket,
    )


def build_chat_service(backend: BackendPort) -> ChatService:
    retrieval = RetrievalService(
        backend,
        match_threshold=settings.match_threshold,
        scan_limit=settings.manual_scan_limit,
    )
    return ChatService(
        get_embedding_provider(),
        retrieval,
        get_chat_streamer(),
        retrieval_limit=settings.retrieval_limit,
    )


def build_conversation_service(backend: BackendPort) -> ConversationService:
    return ConversationService(backend)
