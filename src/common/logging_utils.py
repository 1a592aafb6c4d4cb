"""Centralized logging helpers.

configure_logging() sets up the root logger once from TAGGE_LOG_LEVEL;
the remaining helpers support structured DEBUG traces:

    if is_debug_enabled(logger):
        logger.debug("HTTP request", extra=extra_context(event="http_request", target=safe_url(url)))
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "private_token", "access_token", "auth", "key", "secret", "password")
_TOKEN_LIKE_RE = re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|glpat-[A-Za-z0-9_\-]{20,})\b")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    Level comes from the argument, then TAGGE_LOG_LEVEL, then INFO. Safe to
    call more than once: the handler is only installed the first time.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def add_file_handler(path: str) -> logging.Handler:
    """Mirror log records to a file."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logging.getLogger().addHandler(handler)
    return handler


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: str) -> str:
    """Mask token-looking substrings (GitHub / GitLab personal tokens)."""
    if not text:
        return text
    return _TOKEN_LIKE_RE.sub("[REDACTED]", text)


def safe_url(url: str) -> str:
    """Return the URL with credentials and sensitive query values masked."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "[REDACTED]@" + netloc.split("@", 1)[1]
    query = parts.query
    if query:
        pairs = [
            (k, "[REDACTED]" if any(s in k.lower() for s in _SENSITIVE_KEYS) else v)
            for k, v in parse_qsl(query, keep_blank_values=True)
        ]
        query = urlencode(pairs, safe="[]")
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.monotonic()

    def duration_ms(self) -> int:
        """Elapsed milliseconds (so far, when still running)."""
        end = self._end if self._end is not None else time.monotonic()
        return int((end - self._start) * 1000)
