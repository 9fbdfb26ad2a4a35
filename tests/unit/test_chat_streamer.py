"""Unit tests for the OpenRouter adapter and the chat event streamer."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from fakes import FakeLLM
from study_notes.adapters.outbound.llm.openrouter_adapter import (
    OpenRouterAdapter,
    error_message_from_body,
    extract_text,
)
from study_notes.core.domain import ContentEvent, ErrorEvent, SourcesEvent
from study_notes.core.domain.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMUpstreamError,
    MissingAPIKeyError,
)
from study_notes.core.services.chat_streamer import (
    MISSING_KEY_MESSAGE,
    ChatStreamer,
    build_user_message,
    connection_diagnostic,
    friendly_upstream_error,
)

pytestmark = pytest.mark.unit


def _stream_response(lines, status_code=200, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.iter_lines.return_value = iter(lines)
    return response


def _adapter(response=None, api_key="sk-or-v1-test", **kwargs):
    session = MagicMock()
    if response is not None:
        session.post.return_value = response
    return OpenRouterAdapter(api_key=api_key, session=session, **kwargs), session


def _streamer(llm):
    delays: list[float] = []
    return ChatStreamer(llm, error_word_delay=0.01, sleep=delays.append), delays


class TestExtractText:
    """Incremental text from the known completion shapes."""

    def test_delta_message_and_text_shapes(self):
        assert extract_text({"choices": [{"delta": {"content": "a"}}]}) == "a"
        assert extract_text({"choices": [{"message": {"content": "b"}}]}) == "b"
        assert extract_text({"choices": [{"text": "c"}]}) == "c"

    def test_missing_content(self):
        assert extract_text({"choices": [{"delta": {}}]}) is None
        assert extract_text({"choices": []}) is None
        assert extract_text(["not", "a", "dict"]) is None

    def test_error_message_from_body(self):
        assert error_message_from_body('{"error": {"message": "User not found."}}') == "User not found."
        assert error_message_from_body("<html>bad gateway</html>") == "<html>bad gateway</html>"


class TestOpenRouterStreaming:
    """Frame parsing and HTTP error handling of the streaming call."""

    def test_yields_deltas_until_done(self):
        response = _stream_response(
            [
                b'data: {"choices":[{"delta":{"content":"Hel"}}]}',
                b"",
                b'data: {"choices":[{"delta":{"content":"lo"}}]}',
                b"data: [DONE]",
                b'data: {"choices":[{"delta":{"content":"ignored"}}]}',
            ]
        )
        adapter, session = _adapter(response)

        assert list(adapter.stream_chat([{"role": "user", "content": "hi"}])) == ["Hel", "lo"]
        response.close.assert_called_once()

        kwargs = session.post.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["json"]["stream"] is True
        assert kwargs["headers"]["Authorization"] == "Bearer sk-or-v1-test"
        assert kwargs["headers"]["X-Title"] == "AI Study Notes"
        assert kwargs["timeout"] == (30.0, 120.0)

    def test_skips_invalid_json_and_comments(self):
        response = _stream_response(
            [
                b": OPENROUTER PROCESSING",
                b"data: {not json",
                b'data: {"choices":[{"delta":{"content":"ok"}}]}',
                b"data: [DONE]",
            ]
        )
        adapter, _ = _adapter(response)

        assert list(adapter.stream_chat([])) == ["ok"]

    def test_error_frame_raises_generation_error(self):
        response = _stream_response([b'data: {"error": {"message": "Model overloaded"}}'])
        adapter, _ = _adapter(response)

        with pytest.raises(LLMGenerationError, match="Model overloaded"):
            list(adapter.stream_chat([]))
        response.close.assert_called_once()

    def test_http_status_errors(self):
        adapter, _ = _adapter(_stream_response([], status_code=401, text='{"error":{"message":"User not found."}}'))
        with pytest.raises(LLMUpstreamError) as exc_info:
            list(adapter.stream_chat([]))
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "User not found."

        adapter, _ = _adapter(_stream_response([], status_code=429, text="{}"))
        with pytest.raises(LLMRateLimitError):
            list(adapter.stream_chat([]))

    def test_connection_failure(self):
        adapter, session = _adapter()
        session.post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(LLMConnectionError):
            list(adapter.stream_chat([]))

    def test_read_timeout_mid_stream(self):
        response = MagicMock()
        response.status_code = 200

        def lines():
            yield b'data: {"choices":[{"delta":{"content":"partial"}}]}'
            raise requests.exceptions.ReadTimeout("read timed out")

        response.iter_lines.return_value = lines()
        adapter, _ = _adapter(response)
        stream = adapter.stream_chat([])

        assert next(stream) == "partial"
        with pytest.raises(LLMConnectionError):
            next(stream)
        response.close.assert_called_once()

    def test_closing_stream_early_releases_response(self):
        response = _stream_response(
            [b'data: {"choices":[{"delta":{"content":"a"}}]}', b'data: {"choices":[{"delta":{"content":"b"}}]}']
        )
        adapter, _ = _adapter(response)
        stream = adapter.stream_chat([])

        assert next(stream) == "a"
        stream.close()

        response.close.assert_called_once()

    def test_missing_key(self):
        adapter, session = _adapter(api_key="")

        assert not adapter.is_configured
        with pytest.raises(MissingAPIKeyError):
            list(adapter.stream_chat([]))
        session.post.assert_not_called()


class TestOpenRouterGenerate:
    """Non-streaming completion."""

    def test_returns_message_content(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"choices": [{"message": {"content": "# Notes"}}]}
        adapter, session = _adapter(response)

        assert adapter.generate([{"role": "user", "content": "x"}], temperature=0.3, max_tokens=2000) == "# Notes"
        payload = session.post.call_args.kwargs["json"]
        assert payload["temperature"] == 0.3
        assert payload["max_tokens"] == 2000
        assert "stream" not in payload

    def test_error_object_in_body(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"error": {"message": "No endpoints found"}}
        adapter, _ = _adapter(response)

        with pytest.raises(LLMGenerationError, match="No endpoints found"):
            adapter.generate([])


class TestOpenRouterKeyCheck:
    """One-shot completion used to verify the configured key."""

    def test_success(self):
        response = MagicMock(status_code=200, reason="OK", text='{"choices":[{"message":{"content":"Hi"}}]}')
        adapter, session = _adapter(response)

        result = adapter.check_key()

        assert result["ok"] is True
        assert result["status"] == 200
        assert result["response"].startswith('{"choices"')
        assert session.post.call_args.kwargs["json"]["model"] == adapter.model

    def test_connection_failure(self):
        adapter, session = _adapter()
        session.post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(LLMConnectionError):
            adapter.check_key()


class TestChatStreamer:
    """Event sequence produced for one answer."""

    def test_framing_content_then_sources(self):
        response = _stream_response([b'data: {"choices":[{"delta":{"content":"Hi"}}]}', b"", b"data: [DONE]", b""])
        adapter, _ = _adapter(response)
        streamer, _ = _streamer(adapter)

        events = list(streamer.stream_answer("hello?", "ctx", ["bio.pdf"]))

        assert events == [ContentEvent("Hi"), SourcesEvent(["bio.pdf"])]
        assert [e.to_payload() for e in events] == [{"content": "Hi"}, {"sources": ["bio.pdf"]}]

    def test_invalid_api_key_yields_single_error(self):
        body = json.dumps({"error": {"message": "User not found.", "code": 401}})
        adapter, _ = _adapter(_stream_response([], status_code=401, text=body))
        streamer, _ = _streamer(adapter)

        events = list(streamer.stream_answer("q", "", []))

        assert len(events) == 1
        assert isinstance(events[0], ErrorEvent)
        assert events[0].error.startswith("Error (401): Your OpenRouter API key is invalid or expired.")

    def test_missing_key_yields_error_without_request(self):
        llm = FakeLLM(deltas=["never"], configured=False)
        streamer, _ = _streamer(llm)

        assert list(streamer.stream_answer("q", "", [])) == [ErrorEvent(MISSING_KEY_MESSAGE)]
        assert llm.messages == []

    def test_mid_stream_error_after_content(self):
        llm = FakeLLM(deltas=["Partial "], error=LLMGenerationError("Model overloaded"))
        streamer, _ = _streamer(llm)

        events = list(streamer.stream_answer("q", "", ["a.pdf"]))

        assert events == [ContentEvent("Partial "), ErrorEvent("Model overloaded")]

    def test_connection_failure_types_out_diagnostic(self):
        llm = FakeLLM(error=LLMConnectionError("Failed to reach OpenRouter"))
        streamer, delays = _streamer(llm)

        events = list(streamer.stream_answer("q", "", ["a.pdf"]))

        assert all(isinstance(e, ContentEvent) for e in events)
        assert "".join(e.content for e in events) == connection_diagnostic("Failed to reach OpenRouter")
        assert len(delays) == len(events)
        assert set(delays) == {0.01}

    def test_unexpected_error_after_content_types_out_diagnostic(self):
        llm = FakeLLM(deltas=["Hi"], error=RuntimeError("socket exploded"))
        streamer, delays = _streamer(llm)

        events = list(streamer.stream_answer("q", "", ["a.pdf"]))

        assert events[0] == ContentEvent("Hi")
        assert all(isinstance(e, ContentEvent) for e in events)
        assert "".join(e.content for e in events[1:]) == connection_diagnostic("socket exploded")
        assert len(delays) == len(events) - 1
        assert llm.stream_closed

    def test_unexpected_error_without_message(self):
        llm = FakeLLM(error=RuntimeError())
        streamer, _ = _streamer(llm)

        text = "".join(e.content for e in streamer.stream_answer("q", "", []))

        assert text == connection_diagnostic("Failed to get response from AI")

    def test_closing_early_closes_upstream(self):
        llm = FakeLLM(deltas=["a", "b", "c"])
        streamer, _ = _streamer(llm)
        events = streamer.stream_answer("q", "", [])

        assert next(events) == ContentEvent("a")
        events.close()

        assert llm.stream_closed

    def test_messages_include_system_prompt_and_context(self):
        llm = FakeLLM(deltas=["ok"])
        streamer, _ = _streamer(llm)

        list(streamer.stream_answer("What is ATP?", "ATP stores energy.", []))

        system, user_message = llm.messages[0]
        assert system["role"] == "system"
        assert "study assistant" in system["content"]
        assert user_message == {
            "role": "user",
            "content": "Context from documents:\nATP stores energy.\n\nQuestion: What is ATP?",
        }

    def test_user_message_without_context_is_bare_question(self):
        assert build_user_message("What is ATP?", "") == "What is ATP?"


class TestFriendlyUpstreamError:
    @pytest.mark.parametrize(
        ("status", "message", "expected"),
        [
            (401, "Some other reason", "Error (401): Authentication failed: Some other reason."),
            (429, "", "Error (429): Rate limit exceeded. Please try again in a moment."),
            (503, "", "Error (503): OpenRouter API is currently unavailable. Please try again later."),
            (400, "Bad model", "Error (400): Bad model"),
        ],
    )
    def test_messages(self, status, message, expected):
        assert friendly_upstream_error(status, message).startswith(expected)
