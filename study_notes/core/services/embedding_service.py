"""Embedding provider with a deterministic hash-based fallback.

When no embedding credential is configured, or the remote call fails, a
synthetic vector derived from a string hash is returned instead. Synthetic
vectors carry no semantic signal; they only keep the retrieval path usable
without a credential.
"""

import logging
import math

from ..domain import Embedding, EmbeddingOrigin
from ..ports import EmbeddingPort

SYNTHETIC_DIMENSION = 384

_logger = logging.getLogger(__name__)


def _to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's complement."""
    value &= 0xFFFFFFFF
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def string_hash(text: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to int32."""
    data = text.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = _to_int32(value * 31 + code_unit)
    return value


def synthetic_embedding(text: str, dimension: int = SYNTHETIC_DIMENSION) -> list[float]:
    """Deterministic pseudo-embedding: ``sin((hash + i) * 0.1) * 0.1``."""
    seed = string_hash(text)
    return [math.sin((seed + i) * 0.1) * 0.1 for i in range(dimension)]


class EmbeddingProvider:
    """Produces embeddings, degrading to synthetic vectors instead of failing."""

    def __init__(
        self,
        remote: EmbeddingPort | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            remote: Remote embedding API, or None to always use the fallback.
            logger: Receives fallback diagnostics (module logger by default).
        """
        self.remote = remote
        self.logger = logger or _logger

    def embed(self, text: str) -> Embedding:
        """Embed one text. Never raises."""
        if self.remote is None:
            self.logger.debug("No embedding API configured; using synthetic embedding")
            return Embedding(synthetic_embedding(text), EmbeddingOrigin.SYNTHETIC)

        try:
            values = self.remote.embed(text)
        except Exception as e:
            self.logger.warning("Embedding API failed, using synthetic embedding: %s", e)
            return Embedding(synthetic_embedding(text), EmbeddingOrigin.SYNTHETIC)

        return Embedding(values, EmbeddingOrigin.REMOTE)
