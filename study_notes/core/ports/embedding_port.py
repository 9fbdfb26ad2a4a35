"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for remote embedding providers."""

    model: str

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Return the embedding vector for one text.

        Raises:
            EmbeddingError: On any provider failure.
        """
        ...
