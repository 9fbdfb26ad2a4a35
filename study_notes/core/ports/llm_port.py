"""LLM Port Interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator


class LLMPort(ABC):
    """Abstract interface for chat-completion providers.

    Messages are ``{"role": ..., "content": ...}`` dictionaries.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a credential is available for the provider."""
        ...

    @abstractmethod
    def generate(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return a complete (non-streaming) response."""
        ...

    @abstractmethod
    def stream_chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
    ) -> Iterator[str]:
        """Yield response text increments as they arrive.

        Closing the iterator must release the upstream connection.
        """
        ...
