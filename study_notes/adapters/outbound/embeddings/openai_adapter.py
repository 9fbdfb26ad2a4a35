"""OpenAI embeddings adapter implementing the embedding port."""

import logging

import requests

from ....core.domain.exceptions import EmbeddingAPIError, EmbeddingRateLimitError
from ....core.ports import EmbeddingPort

logger = logging.getLogger(__name__)


class OpenAIEmbeddingAdapter(EmbeddingPort):
    """Calls the OpenAI ``/embeddings`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: OpenAI API key.
            model: Embedding model identifier.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            session: Optional HTTP session (a new one is created otherwise).
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def embed(self, text: str) -> list[float]:
        try:
            response = self.session.post(
                f"{self.base_url}/embeddings",
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json={"model": self.model, "input": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EmbeddingAPIError(f"Embedding request failed: {e}", cause=e) from e

        if response.status_code == 429:
            raise EmbeddingRateLimitError(
                "Embedding API rate limit exceeded", context={"status_code": 429}
            )
        if not 200 <= response.status_code < 300:
            raise EmbeddingAPIError(
                f"Embedding API returned {response.status_code}",
                context={"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            vector = response.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise EmbeddingAPIError("Unexpected embedding response format", cause=e) from e

        if not isinstance(vector, list) or not vector:
            raise EmbeddingAPIError("Embedding response contained no vector")

        logger.debug("Received %d-dimensional embedding from %s", len(vector), self.model)
        return [float(x) for x in vector]
