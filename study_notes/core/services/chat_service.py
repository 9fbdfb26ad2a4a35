"""Chat orchestration: embed the question, retrieve context, stream the answer."""

import logging
from collections.abc import Iterator

from ..domain import ChatStreamEvent, build_context, collect_sources
from ..domain.exceptions import EmptyQuestionError
from ..domain.utils import clean_text
from .chat_streamer import ChatStreamer
from .embedding_service import EmbeddingProvider
from .retrieval_service import RetrievalService

logger = logging.getLogger(__name__)


class ChatService:
    """Answers one question against the caller's documents."""

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        retrieval: RetrievalService,
        streamer: ChatStreamer,
        retrieval_limit: int = 5,
    ) -> None:
        self.embeddings = embeddings
        self.retrieval = retrieval
        self.streamer = streamer
        self.retrieval_limit = retrieval_limit

    def answer(self, user_id: str, question: str) -> Iterator[ChatStreamEvent]:
        """Return the event stream for ``question``.

        Embedding and retrieval run eagerly so an empty question fails before
        the response starts streaming.

        Raises:
            EmptyQuestionError: Question is empty or whitespace only.
        """
        question = clean_text(question or "")
        if not question:
            raise EmptyQuestionError("Question is required")

        query = self.embeddings.embed(question)
        chunks = self.retrieval.retrieve(user_id, query, limit=self.retrieval_limit)
        logger.info(
            "Retrieved %d chunks for question (%s embedding)",
            len(chunks),
            query.origin.value,
        )

        return self.streamer.stream_answer(question, build_context(chunks), collect_sources(chunks))
