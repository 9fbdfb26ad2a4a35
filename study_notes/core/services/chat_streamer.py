"""Relays a streaming LLM answer as tagged chat events.

Event order for one answer: zero or more ``ContentEvent``, then exactly one
terminal event (``SourcesEvent`` on success, ``ErrorEvent`` on failure). The
exceptions are a dropped connection and any unexpected failure, which stream
a diagnostic message as content and end without a terminal event.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import closing

from ..domain import ChatStreamEvent, ContentEvent, ErrorEvent, SourcesEvent
from ..domain.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMUpstreamError,
    MissingAPIKeyError,
)
from ..ports import LLMPort

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = """You are a professional study assistant. Provide clear, structured, and well-formatted responses.

FORMATTING RULES:
- Use markdown formatting (headings with #, ##, ###)
- Use bullet points (-) and numbered lists (1., 2., 3.)
- Use **bold** for important terms and definitions
- Break content into clear sections with headings
- Keep paragraphs short (2-3 sentences max)
- Use proper spacing between sections

RESPONSE STYLE:
- Be concise and focused
- Structure information clearly
- Use headings to organize content
- Make content exam-friendly and readable
- Avoid long paragraphs
- Use lists for multiple points

If the context doesn't contain enough information, say so clearly. Always cite which documents you're using when possible."""

MISSING_KEY_MESSAGE = (
    "OpenRouter API key not found. Please add OPENROUTER_API_KEY to your .env file "
    "and restart the server."
)


def build_user_message(question: str, context: str) -> str:
    """User turn: the question, prefixed by document context when there is any."""
    if context:
        return f"Context from documents:\n{context}\n\nQuestion: {question}"
    return question


def friendly_upstream_error(status_code: int, message: str) -> str:
    """User-facing explanation for a failed upstream response."""
    if status_code == 401:
        if "User not found" in message or "Invalid API key" in message:
            friendly = (
                "Your OpenRouter API key is invalid or expired. Please check your API key at "
                "https://openrouter.ai/keys and update it in your .env file."
            )
        else:
            friendly = (
                f"Authentication failed: {message}. "
                "Please verify your OpenRouter API key is correct."
            )
    elif status_code == 429:
        friendly = "Rate limit exceeded. Please try again in a moment."
    elif status_code >= 500:
        friendly = "OpenRouter API is currently unavailable. Please try again later."
    else:
        friendly = message or "Unknown error"
    return f"Error ({status_code}): {friendly}"


def connection_diagnostic(reason: str) -> str:
    """Multi-sentence message streamed when the upstream connection fails."""
    return (
        f"Error: {reason}\n\n"
        "Possible causes:\n"
        "1. Invalid or missing OpenRouter API key\n"
        "2. Network connection issue\n"
        "3. Model unavailable\n\n"
        "Please check your .env file and ensure OPENROUTER_API_KEY is set correctly."
    )


class ChatStreamer:
    """Streams one chat answer from the LLM as ``ChatStreamEvent`` objects."""

    def __init__(
        self,
        llm: LLMPort,
        error_word_delay: float = 0.02,
        sleep: Callable[[float], None] = time.sleep,
        system_prompt: str = CHAT_SYSTEM_PROMPT,
    ) -> None:
        """Initialize the streamer.

        Args:
            llm: Chat-completion provider.
            error_word_delay: Pause before each word of a connection diagnostic.
            sleep: Sleep function (injectable for tests).
            system_prompt: System instructions sent with every question.
        """
        self.llm = llm
        self.error_word_delay = error_word_delay
        self.sleep = sleep
        self.system_prompt = system_prompt

    def build_messages(self, question: str, context: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": build_user_message(question, context)},
        ]

    def stream_answer(
        self, question: str, context: str, sources: list[str]
    ) -> Iterator[ChatStreamEvent]:
        """Yield answer events; closing the iterator releases the upstream stream."""
        if not self.llm.is_configured:
            logger.error("OPENROUTER_API_KEY not configured; refusing chat request")
            yield ErrorEvent(MISSING_KEY_MESSAGE)
            return

        messages = self.build_messages(question, context)
        try:
            with closing(self.llm.stream_chat(messages)) as deltas:
                for delta in deltas:
                    yield ContentEvent(delta)
        except MissingAPIKeyError as e:
            yield ErrorEvent(e.message)
            return
        except LLMUpstreamError as e:
            yield ErrorEvent(friendly_upstream_error(e.status_code, e.message))
            return
        except LLMGenerationError as e:
            logger.error("LLM reported an error mid-stream: %s", e.message)
            yield ErrorEvent(e.message or "API error")
            return
        except LLMConnectionError as e:
            logger.error("Streaming error: %s", e.message)
            yield from self._type_out(connection_diagnostic(e.message))
            return
        except Exception as e:
            logger.exception("Unexpected error while streaming chat answer")
            yield from self._type_out(connection_diagnostic(str(e) or "Failed to get response from AI"))
            return

        yield SourcesEvent(list(sources))

    def _type_out(self, message: str) -> Iterator[ChatStreamEvent]:
        words = message.split(" ")
        for i, word in enumerate(words):
            self.sleep(self.error_word_delay)
            yield ContentEvent(word + (" " if i < len(words) - 1 else ""))
