"""Exception handling utilities for consistent error formatting.

This module provides functions to format exceptions as structured JSON,
log them consistently, and map them to HTTP status codes across the API and CLI.
"""

import json
import logging
import traceback
from typing import Any

from ...core.domain.exceptions import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
    EmbeddingRateLimitError,
    ExtractionError,
    LLMRateLimitError,
    NotFoundError,
    StudyNotesError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Format any exception as structured JSON.

    Works with both StudyNotesError and standard Python exceptions.

    Args:
        exc: The exception to format.
        include_trace: If True, include full stack trace.
        extra_context: Additional context to include in output.

    Returns:
        Dictionary with structured error information.
    """
    if isinstance(exc, StudyNotesError):
        result = exc.to_dict(include_trace=include_trace)
        if extra_context:
            result.setdefault("context", {}).update(extra_context)
        return result

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last_frame = tb[-1] if tb else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": "PYTHON_ERR",
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last_frame.name if last_frame else "<unknown>",
            "file": (
                last_frame.filename.split("\\")[-1].split("/")[-1] if last_frame else "<unknown>"
            ),
            "line": last_frame.lineno if last_frame else 0,
        },
    }

    if extra_context:
        result["context"] = extra_context

    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]

    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log exception in structured JSON format.

    Example:
        >>> try:
        ...     backend.insert("notes", row)
        ... except BackendError as e:
        ...     log_exception(e, extra_context={"table": "notes"})
    """
    log_instance = log or logger

    exc_data = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    log_instance.log(
        level,
        json.dumps(exc_data, indent=2, default=str),
        extra={"error_code": get_error_code(exc), **(extra_context or {})},
    )


def get_error_code(exc: Exception) -> str:
    """Error code of a StudyNotesError, or ``PYTHON_ERR`` for anything else."""
    if isinstance(exc, StudyNotesError):
        return exc.error_code
    return "PYTHON_ERR"


def get_http_status_code(exc: Exception) -> int:
    """Map exception type to appropriate HTTP status code.

    Args:
        exc: The exception to map.

    Returns:
        HTTP status code (400, 401, 404, 429, 500, 502, 503).
    """
    if isinstance(exc, ValidationError | ExtractionError):
        return 400
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, LLMRateLimitError | EmbeddingRateLimitError):
        return 429
    if isinstance(exc, BackendError):
        return 502
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, StudyNotesError):
        return 500

    # Standard Python exceptions
    if isinstance(exc, ValueError):
        return 400
    if isinstance(exc, ConnectionError | TimeoutError):
        return 503

    return 500
