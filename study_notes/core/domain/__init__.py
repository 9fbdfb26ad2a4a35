"""Domain models for AI Study Notes.

- document: UploadedFile, ExtractedDocument and Chunk for the upload pipeline
- embedding: Embedding vectors tagged with their origin
- chat: RetrievedChunk, chat stream events and stored chat messages
- upload: upload batch results and the authenticated user

All models are re-exported here:

    from study_notes.core.domain import Chunk, Embedding, ContentEvent
"""

from .chat import (
    UNKNOWN_SOURCE,
    ChatMessage,
    ChatStreamEvent,
    ContentEvent,
    ErrorEvent,
    RetrievedChunk,
    SourcesEvent,
    build_context,
    collect_sources,
)
from .document import Chunk, ExtractedDocument, UploadedFile
from .embedding import Embedding, EmbeddingOrigin
from .upload import AuthenticatedUser, FileProblem, ProcessedDocument, UploadResult

__all__ = [
    # Document models
    "UploadedFile",
    "ExtractedDocument",
    "Chunk",
    # Embeddings
    "Embedding",
    "EmbeddingOrigin",
    # Chat
    "UNKNOWN_SOURCE",
    "RetrievedChunk",
    "ContentEvent",
    "ErrorEvent",
    "SourcesEvent",
    "ChatStreamEvent",
    "ChatMessage",
    "build_context",
    "collect_sources",
    # Upload
    "AuthenticatedUser",
    "FileProblem",
    "ProcessedDocument",
    "UploadResult",
]
