import locale
import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)

OPENROUTER_KEY_PREFIX = "sk-or-v1-"


def log_encoding_info() -> None:
    logger.info(f"System encoding: {sys.getfilesystemencoding()}")
    logger.info(f"Stdout encoding: {sys.stdout.encoding}")
    logger.info(f"Locale: {locale.getlocale()}")
    logger.info(f"Default encoding: {sys.getdefaultencoding()}")


def mask_secret(value: str, head: int = 15, tail: int = 10) -> str:
    """First ``head`` and last ``tail`` characters; short secrets are fully masked."""
    if len(value) <= head + tail:
        return "*" * len(value)
    return f"{value[:head]}...{value[-tail:]}"


def credential_status(value: str, expected_prefix: str | None = None) -> dict[str, Any]:
    """Diagnostics for one credential that never reveal the full value."""
    if not value:
        return {"exists": False, "length": 0, "starts_with_expected_prefix": None, "preview": None}
    return {
        "exists": True,
        "length": len(value),
        "starts_with_expected_prefix": value.startswith(expected_prefix) if expected_prefix else None,
        "preview": mask_secret(value),
    }
