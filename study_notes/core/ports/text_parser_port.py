"""Text Parser Port Interface."""

from abc import ABC, abstractmethod


class TextParserPort(ABC):
    """One way of turning document bytes into plain text.

    Implementations are stateless so a single instance can serve concurrent
    requests.
    """

    name: str

    @abstractmethod
    def try_extract(self, content: bytes) -> str:
        """Return non-empty text, or raise if this parser cannot read the bytes."""
        ...
