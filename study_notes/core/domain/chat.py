"""Chat models: retrieved context, stream events and stored messages."""

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_SOURCE = "Unknown"


@dataclass(frozen=True)
class RetrievedChunk:
    """A stored chunk returned by similarity retrieval.

    Attributes:
        content: Chunk text.
        similarity: Cosine similarity to the query (not clamped).
        source_document_name: File the chunk came from, or ``"Unknown"``.
    """

    content: str
    similarity: float
    source_document_name: str = UNKNOWN_SOURCE


@dataclass(frozen=True)
class ContentEvent:
    """Incremental answer text."""

    content: str

    def to_payload(self) -> dict[str, Any]:
        return {"content": self.content}


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal error; no further events follow."""

    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error}


@dataclass(frozen=True)
class SourcesEvent:
    """Terminal citation list sent after a successful answer."""

    sources: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"sources": list(self.sources)}


ChatStreamEvent = ContentEvent | ErrorEvent | SourcesEvent


@dataclass(frozen=True)
class ChatMessage:
    """One message in a saved conversation."""

    role: str
    content: str
    sources: list[str] | None = None

    def to_row(self, conversation_id: str) -> dict[str, Any]:
        """Row shape for the ``chat_messages`` table."""
        return {
            "conversation_id": conversation_id,
            "role": self.role,
            "content": self.content,
            "sources": self.sources or None,
        }


def build_context(chunks: list[RetrievedChunk]) -> str:
    """Join retrieved chunk contents into one context block."""
    return "\n\n---\n\n".join(chunk.content for chunk in chunks if chunk.content)


def collect_sources(chunks: list[RetrievedChunk]) -> list[str]:
    """Unique source document names in first-seen order, ``Unknown`` dropped."""
    sources: list[str] = []
    for chunk in chunks:
        name = chunk.source_document_name
        if name and name != UNKNOWN_SOURCE and name not in sources:
            sources.append(name)
    return sources
