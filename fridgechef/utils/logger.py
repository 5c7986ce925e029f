"""Logging infrastructure for FridgeChef.

Provides centralized logging with configurable format (text/JSON) and level.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Every handler carries a RedactingFilter so API keys never reach the output,
even when an exception message or a header dump contains one.
"""

import json
import logging
import os
import re
import sys
from typing import Any

# Bearer tokens and OpenAI-style secret keys
_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE),
    re.compile(r"\bsk-[A-Za-z0-9_\-]{4,}"),
)


def mask_secret(secret: str, visible: int = 4) -> str:
    """Mask a secret for display, keeping only the last few characters.

    Args:
        secret: Value to mask.
        visible: Number of trailing characters left readable.

    Returns:
        "<unset>" for empty values, otherwise "****" followed by the tail.
    """
    if not secret:
        return "<unset>"
    if len(secret) <= visible * 2:
        return "****"
    return f"****{secret[-visible:]}"


def redact(text: str) -> str:
    """Replace every credential-looking substring with a masked marker."""
    text = _SECRET_PATTERNS[0].sub(r"\1****", text)
    return _SECRET_PATTERNS[1].sub("sk-****", text)


class RedactingFilter(logging.Filter):
    """Filter that scrubs credentials from the rendered log message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        scrubbed = redact(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


# Attributes callers attach with `extra=`, in output order
CONTEXT_FIELDS = ("task", "model")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class _SafeFormatter(logging.Formatter):
    """Base formatter whose tracebacks are scrubbed like messages are."""

    def formatException(self, ei) -> str:
        return redact(super().formatException(ei))


class JSONFormatter(_SafeFormatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class RichTextFormatter(_SafeFormatter):
    """Colored single-line output with a level icon and the task in brackets.

    Example:
        🥗 2024-05-01 12:00:00 INFO     fridgechef           [image_analysis] Detected 6 ingredient(s)
    """

    RESET = "\033[0m"

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🥗",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🔥",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        context = _context(record)
        prefix = f"[{context['task']}] " if "task" in context else ""

        line = (
            f"{self.COLORS.get(level, self.RESET)}{self.ICONS.get(level, '')} "
            f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} {level:<8} {record.name:<20} "
            f"{prefix}{record.getMessage()}{self.RESET}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, configured on first use from LOG_LEVEL and LOG_TYPE.

    Output goes to stderr so stdout stays clean for --debug JSON output.
    """
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance

    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RedactingFilter())
    handler.setFormatter(JSONFormatter() if os.getenv("LOG_TYPE", "text").lower() == "json" else RichTextFormatter())

    instance.setLevel(level)
    instance.addHandler(handler)
    return instance


logger = get_logger("fridgechef")

# Connection pool chatter from the HTTP client is not useful at INFO
logging.getLogger("aiohttp").setLevel(logging.WARNING)
