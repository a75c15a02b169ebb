"""Helpers that keep authentication tokens out of logs and reprs."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Tuple

PACKAGE_LOGGER_NAME = "mobileservices"
REDACTED = "***REDACTED***"

_VISIBLE_PREFIX = 4
_SHORT_TOKEN_LENGTH = 8

_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"(bearer\s+)([A-Za-z0-9_\-\.=+/]+)", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(x-zumo-auth['\"]?\s*:\s*['\"]?)([^'\"\s,]+)", re.IGNORECASE), rf"\1{REDACTED}"),
    (
        re.compile(r"(authentication[_-]?token['\"]?\s*[:=]\s*['\"]?)([^'\"\s,)]+)", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
]


def mask_token(token: Optional[str]) -> str:
    """Return a display-safe stand-in for ``token``."""

    if token is None:
        return "<none>"
    if token == "":
        return "<empty>"
    if len(token) <= _SHORT_TOKEN_LENGTH:
        return "***"
    return f"{token[:_VISIBLE_PREFIX]}***"


def sanitize_message(message: str) -> str:
    sanitized = message
    for pattern, replacement in _PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


class TokenRedactingFilter(logging.Filter):
    """Scrub bearer credentials from log records before they are emitted.

    Both the message and any formatted exception text are sanitised. A record
    whose arguments do not match its format string keeps its arguments so the
    handler reports the mismatch through ``handleError``.
    """

    _exception_formatter = logging.Formatter()

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            record.msg = sanitize_message(str(record.msg))
        else:
            record.msg = sanitize_message(message)
            record.args = None

        if record.exc_info and not record.exc_text:
            record.exc_text = self._exception_formatter.formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = sanitize_message(record.exc_text)
        return True


def _is_redacting(handler: logging.Handler) -> bool:
    return any(isinstance(existing, TokenRedactingFilter) for existing in handler.filters)


def configure_logging(
    level: int = logging.INFO,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Route package log records through a redacting handler.

    Filters on a logger do not see records propagated from child loggers, so
    the filter is attached to the handler. Repeated calls reuse the handler
    installed by the first one unless a new ``handler`` is supplied.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if handler is None:
        if not any(_is_redacting(existing) for existing in logger.handlers):
            handler = logging.StreamHandler()
    if handler is not None:
        if not _is_redacting(handler):
            handler.addFilter(TokenRedactingFilter())
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = [
    "PACKAGE_LOGGER_NAME",
    "REDACTED",
    "TokenRedactingFilter",
    "configure_logging",
    "mask_token",
    "sanitize_message",
]
