"""Logging setup for the API and the CLI.

Everything under the ``study_notes`` package logs through one configured
logger. Records may carry request fields (``path``, ``method``, ``user_id``)
and an ``error_code`` via ``extra=``; the JSON formatter lifts those to the
top level so a log collector can filter on them.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

LOGGER_NAME = "study_notes"

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Record attributes copied into JSON output when a caller passes them via ``extra``
EXTRA_FIELDS = ("error_code", "path", "method", "user_id", "collection_id")

# Third-party loggers that are chatty at INFO: HTTP clients log every request,
# pypdf warns about every malformed xref it repairs.
QUIET_LOGGERS = {
    "urllib3": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "multipart": logging.WARNING,
    "pypdf": logging.ERROR,
}


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per line, with exception details when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONExceptionFormatter()
    return logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR). Unknown names mean INFO.
        log_file: Also write to this file (UTF-8), creating parent directories.
        json_format: Emit JSON lines instead of the plain pipe format.

    Returns:
        The configured ``study_notes`` logger.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()

    formatter = build_formatter(json_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return package_logger
