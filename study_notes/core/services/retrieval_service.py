"""Similarity retrieval over a user's stored document chunks."""

import json
import logging
from typing import Any

from ..domain import UNKNOWN_SOURCE, Embedding, RetrievedChunk
from ..domain.utils import cosine_similarity
from ..ports import BackendPort

_logger = logging.getLogger(__name__)

CHUNKS_TABLE = "document_chunks"
MATCH_FUNCTION = "match_documents"


def _document_name(row: dict[str, Any]) -> str:
    """Source file name from a flat ``document_name`` or an embedded relation."""
    name = row.get("document_name")
    if not name:
        for relation in ("documents", "document_collections"):
            nested = row.get(relation)
            if isinstance(nested, dict):
                name = nested.get("name") or nested.get("file_name")
                if name:
                    break
    return name or UNKNOWN_SOURCE


def _parse_vector(raw: Any) -> list[float] | None:
    """Stored embedding as floats; pgvector columns arrive as ``"[...]"`` strings."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, list) or not raw:
        return None
    try:
        return [float(x) for x in raw]
    except (TypeError, ValueError):
        return None


class RetrievalService:
    """Finds the stored chunks most similar to a query embedding.

    The backend's similarity RPC is tried first. If it fails for any reason,
    a bounded manual scan computes cosine similarity locally.
    """

    def __init__(
        self,
        backend: BackendPort,
        match_threshold: float = 0.7,
        scan_limit: int = 20,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the retrieval service.

        Args:
            backend: Backend service bound to the requesting user.
            match_threshold: Minimum similarity passed to the RPC.
            scan_limit: Maximum rows fetched by the manual fallback.
            logger: Receives fallback diagnostics (module logger by default).
        """
        self.backend = backend
        self.match_threshold = match_threshold
        self.scan_limit = scan_limit
        self.logger = logger or _logger

    def retrieve(self, user_id: str, query: Embedding, limit: int = 5) -> list[RetrievedChunk]:
        """Return up to ``limit`` chunks, best similarity first. Never raises."""
        try:
            return self._search_rpc(user_id, query, limit)
        except Exception as e:
            self.logger.warning("Similarity RPC failed, falling back to manual scan: %s", e)
            return self.manual_search(user_id, query, limit)

    def _search_rpc(self, user_id: str, query: Embedding, limit: int) -> list[RetrievedChunk]:
        rows = self.backend.rpc(
            MATCH_FUNCTION,
            {
                "query_embedding": query.values,
                "match_threshold": self.match_threshold,
                "match_count": limit,
                "user_id": user_id,
            },
        )
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise TypeError(f"{MATCH_FUNCTION} returned {type(rows).__name__}, expected list")

        results = [
            RetrievedChunk(
                content=row.get("content") or "",
                similarity=float(row.get("similarity") or 0.0),
                source_document_name=_document_name(row),
            )
            for row in rows
        ]
        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:limit]

    def manual_search(self, user_id: str, query: Embedding, limit: int) -> list[RetrievedChunk]:
        """Cosine scan over at most ``scan_limit`` of the user's chunks."""
        try:
            rows = self.backend.select(
                CHUNKS_TABLE, filters={"user_id": user_id}, limit=self.scan_limit
            )
        except Exception as e:
            self.logger.warning("Manual chunk scan failed: %s", e)
            return []

        results = [
            RetrievedChunk(
                content=row.get("content") or "",
                similarity=self._row_similarity(row, query),
                source_document_name=_document_name(row),
            )
            for row in rows
        ]
        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:limit]

    def _row_similarity(self, row: dict[str, Any], query: Embedding) -> float:
        origin = row.get("embedding_origin")
        if origin and origin != query.origin.value:
            return 0.0
        vector = _parse_vector(row.get("embedding"))
        if vector is None:
            return 0.0
        return cosine_similarity(vector, query.values)
