"""OpenRouter chat-completions adapter implementing the LLM port.

Streaming responses are newline-delimited ``data: <json>`` frames terminated
by ``data: [DONE]``. Lines that are not valid JSON are skipped rather than
ending the stream.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any

import requests

from ....core.domain.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMUpstreamError,
    MissingAPIKeyError,
)
from ....core.ports import LLMPort

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_MARKER = "[DONE]"


def extract_text(payload: Any) -> str | None:
    """Incremental text from any of the known completion shapes.

    Checks ``choices[0].delta.content``, then ``choices[0].message.content``,
    then ``choices[0].text``.
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    choice = choices[0]
    for key in ("delta", "message"):
        part = choice.get(key)
        if isinstance(part, dict) and part.get("content"):
            return part["content"]
    text = choice.get("text")
    return text or None


def error_message_from_body(body: str) -> str:
    """Best machine-readable error message from an error response body."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return body[:200]
    error = parsed.get("error") if isinstance(parsed, dict) else None
    if isinstance(error, dict):
        if error.get("message"):
            return str(error["message"])
        return json.dumps(error)
    if error:
        return str(error)
    return body[:200]


class OpenRouterAdapter(LLMPort):
    """Chat completions over the OpenRouter (OpenAI-compatible) REST API."""

    def __init__(
        self,
        api_key: str,
        model: str = "meta-llama/llama-3.2-3b-instruct:free",
        base_url: str = "https://openrouter.ai/api/v1",
        site_url: str = "http://localhost:3000",
        app_title: str = "AI Study Notes",
        timeout: float = 30.0,
        stream_read_timeout: float = 120.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: OpenRouter API key (empty when not configured).
            model: Model identifier.
            base_url: API base URL.
            site_url: Sent as ``HTTP-Referer`` for attribution.
            app_title: Sent as ``X-Title`` for attribution.
            timeout: Connect timeout, and read timeout for non-streaming calls.
            stream_read_timeout: Maximum wait between streamed lines.
            session: Optional HTTP session (a new one is created otherwise).
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.site_url = site_url
        self.app_title = app_title
        self.timeout = timeout
        self.stream_read_timeout = stream_read_timeout
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.site_url,
            "X-Title": self.app_title,
        }

    def _require_key(self) -> None:
        if not self.api_key:
            raise MissingAPIKeyError(
                "OpenRouter API key not found. Please add OPENROUTER_API_KEY to your .env file "
                "and restart the server."
            )

    def _raise_for_status(self, response: requests.Response) -> None:
        if 200 <= response.status_code < 300:
            return
        message = error_message_from_body(response.text)
        logger.error("OpenRouter API error %s: %s", response.status_code, message[:200])
        error_cls = LLMRateLimitError if response.status_code == 429 else LLMUpstreamError
        raise error_cls(message, status_code=response.status_code)

    def generate(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return the full completion text (empty string if the model said nothing)."""
        self._require_key()

        payload: dict[str, Any] = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            response = self.session.post(
                self.completions_url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LLMConnectionError(f"Failed to reach OpenRouter: {e}", cause=e) from e

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise LLMGenerationError("OpenRouter returned a non-JSON response", cause=e) from e
        if isinstance(data, dict) and data.get("error"):
            raise LLMGenerationError(error_message_from_body(json.dumps(data)))
        return extract_text(data) or ""

    def check_key(self, prompt: str = "Hello, say hi back in one word.") -> dict[str, Any]:
        """Send one tiny completion and report the raw outcome.

        Non-2xx responses are reported, not raised, so a rejected key shows
        up with its status and body.
        """
        self._require_key()

        try:
            response = self.session.post(
                self.completions_url,
                headers=self._headers(),
                json={"model": self.model, "messages": [{"role": "user", "content": prompt}]},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LLMConnectionError(f"Failed to reach OpenRouter: {e}", cause=e) from e

        return {
            "status": response.status_code,
            "status_text": response.reason or "",
            "ok": 200 <= response.status_code < 300,
            "response": (response.text or "")[:500],
        }

    def stream_chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
    ) -> Iterator[str]:
        """Yield content increments from a streaming completion.

        Raises:
            MissingAPIKeyError: No key configured (before any request).
            LLMUpstreamError: Non-success HTTP status.
            LLMGenerationError: Provider sent an error object mid-stream.
            LLMConnectionError: Network failure or timeout at any point.
        """
        self._require_key()

        payload: dict[str, Any] = {"model": self.model, "messages": messages, "stream": True}
        if temperature is not None:
            payload["temperature"] = temperature

        logger.info("Opening OpenRouter stream (model=%s)", self.model)
        try:
            response = self.session.post(
                self.completions_url,
                headers=self._headers(),
                json=payload,
                stream=True,
                timeout=(self.timeout, self.stream_read_timeout),
            )
        except requests.RequestException as e:
            raise LLMConnectionError(f"Failed to reach OpenRouter: {e}", cause=e) from e

        try:
            self._raise_for_status(response)
            yield from self._iter_frames(response)
        except requests.RequestException as e:
            raise LLMConnectionError(f"OpenRouter stream interrupted: {e}", cause=e) from e
        finally:
            response.close()

    def _iter_frames(self, response: requests.Response) -> Iterator[str]:
        for raw_line in response.iter_lines():
            line = raw_line.decode("utf-8", errors="replace") if isinstance(raw_line, bytes) else raw_line
            if not line.strip() or not line.startswith(DATA_PREFIX):
                continue

            data = line[len(DATA_PREFIX) :].strip()
            if data == DONE_MARKER or not data:
                return

            try:
                parsed = json.loads(data)
            except ValueError:
                logger.debug("Skipping non-JSON line: %s", data[:50])
                continue

            if isinstance(parsed, dict) and parsed.get("error"):
                raise LLMGenerationError(
                    error_message_from_body(data), context={"frame": data[:200]}
                )

            content = extract_text(parsed)
            if content:
                yield content
