"""LLM exceptions for AI Study Notes."""

from typing import Any

from .base import StudyNotesError


class LLMError(StudyNotesError):
    """Base error for LLM operations."""

    error_code = "SN_LLM_001"


class LLMConnectionError(LLMError):
    """Could not reach the LLM provider, or the connection dropped mid-stream.

    Common causes:
    - Network issues
    - Read timeout
    - Provider closed the connection
    """

    error_code = "SN_LLM_002"


class LLMUpstreamError(LLMError):
    """LLM provider answered with a non-success HTTP status."""

    error_code = "SN_LLM_003"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, cause=cause, context={"status_code": status_code, **(context or {})})
        self.status_code = status_code


class LLMRateLimitError(LLMUpstreamError):
    """Rate limit exceeded on LLM provider.

    Free-tier models have limited requests per minute.
    """

    error_code = "SN_LLM_004"


class LLMGenerationError(LLMError):
    """Provider reported an error inside an otherwise successful response."""

    error_code = "SN_LLM_005"
