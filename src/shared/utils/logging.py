"""Shared logging configuration.

The HTTP handlers, the local server and the CLI all configure the root
logger through ``setup_logging``. Locally the output is plain text; on Cloud
Functions ``LOG_FORMAT=json`` emits one JSON object per line so that Cloud
Logging picks up the ``severity`` field.
"""

from __future__ import annotations
import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any, Optional

_NOISY_LOGGERS = ("urllib3", "google", "grpc", "werkzeug")
LOG_FORMATS = ("text", "json")

_API_KEY_RE = re.compile(r"(?i)(x-api-key['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)")
# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_KEYS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def redact(message: str) -> str:
    """Mask API key values that end up in log messages."""
    return _API_KEY_RE.sub(r"\1<redacted>", message)


class JsonFormatter(logging.Formatter):
    """One JSON document per record, keyed the way Cloud Logging expects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_KEYS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return redact(super().format(record))


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    include_timestamp: bool = True,
    log_format: Optional[str] = None,
) -> None:
    """Configure root logger with console handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, reads from LOG_LEVEL env var or defaults to INFO.
        format_string: Custom format string for text output.
        include_timestamp: Whether to include timestamp in text log messages.
        log_format: ``text`` or ``json``. If None, reads LOG_FORMAT (default text).

    Example:
        >>> setup_logging(level="DEBUG", log_format="json")
        >>> logging.getLogger(__name__).info("Summarized %d articles", 3)
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("LOG_FORMAT", "text")).lower()

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        if format_string is None:
            if include_timestamp:
                format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            else:
                format_string = "[%(levelname)s] %(name)s: %(message)s"
        handler.setFormatter(_RedactingFormatter(format_string, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        handlers=[handler],
        force=True,
    )

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger instance with optional custom level."""
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger
