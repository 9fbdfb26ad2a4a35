"""Embedding vector model."""

from dataclasses import dataclass
from enum import Enum


class EmbeddingOrigin(str, Enum):
    """Where an embedding vector came from.

    Vectors of different origin live in different spaces and must never be
    compared with each other.
    """

    REMOTE = "remote"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class Embedding:
    """A fixed-length vector tagged with its origin."""

    values: list[float]
    origin: EmbeddingOrigin

    @property
    def dimension(self) -> int:
        return len(self.values)

    @property
    def is_synthetic(self) -> bool:
        return self.origin is EmbeddingOrigin.SYNTHETIC
