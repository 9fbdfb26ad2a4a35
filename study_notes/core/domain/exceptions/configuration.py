"""Configuration-related exceptions for AI Study Notes."""

from .base import StudyNotesError


class ConfigurationError(StudyNotesError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "SN_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """Required API key is not configured."""

    error_code = "SN_CFG_002"

