"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
"""

import logging
import re
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False

_TELEGRAM_BOT_TOKEN_IN_URL_RE = re.compile(
    r"(https?://api\.telegram\.org/(?:file/)?bot)([^/\s]+)"
)
_TELEGRAM_BOT_TOKEN_RAW_RE = re.compile(r"\b\d{6,}:[A-Za-z0-9_-]{20,}\b")


def redact_sensitive_text(text: str) -> str:
    """Mask Telegram bot tokens in log text."""
    redacted = _TELEGRAM_BOT_TOKEN_IN_URL_RE.sub(r"\1<redacted>", text)
    return _TELEGRAM_BOT_TOKEN_RAW_RE.sub("<redacted_token>", redacted)


class SensitiveLogFilter(logging.Filter):
    """Keep bot tokens out of request and download URLs logged by httpx."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_sensitive_text(message)
        if redacted != message:
            # Store the formatted text so args are not interpolated again.
            record.msg = redacted
            record.args = ()
        return True


def _init_logging() -> None:
    """Configure the root logger once."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    handler.addFilter(SensitiveLogFilter())
    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A configured logging.Logger.
    """
    _init_logging()
    return logging.getLogger(name)
