"""Centralized logging setup and structured DEBUG helpers.

When running inside GitHub Actions the root handler renders records as
workflow commands (``::debug::``, ``::warning::``, ``::error::``) so the
runner folds debug traces away and turns errors into annotations. Outside
the runner a plain ``[LEVEL] message`` format is used.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "authorization", "password", "secret")


def in_github_actions() -> bool:
    """Return True when the process runs as a GitHub Actions step."""
    return os.environ.get(Constants.ENV_GITHUB_ACTIONS, "").lower() == "true"


def escape_data(value: Any) -> str:
    """Escape a message for use as workflow command data."""
    return (
        str(value)
        .replace("%", "%25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
    )


class ActionsFormatter(logging.Formatter):
    """Render log records as GitHub Actions workflow commands."""

    _COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info and record.levelno >= logging.ERROR:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        command = self._COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def _resolve_level() -> int:
    if os.environ.get(Constants.ENV_RUNNER_DEBUG) == "1":
        return logging.DEBUG
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(stream=None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; previously installed handlers are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    if in_github_actions():
        handler.setFormatter(ActionsFormatter())
    else:
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_resolve_level())


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted for this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped and sensitive keys are redacted.
    """
    context: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if any(marker in key.lower() for marker in _SENSITIVE_KEYS):
            value = redact(value)
        context[key] = value
    return context


def redact(value: Optional[Any]) -> str:
    """Mask a secret, keeping a short prefix for correlation."""
    if not value:
        return ""
    text = str(value)
    if len(text) <= 4:
        return "***"
    return f"{text[:4]}***"


def safe_url(url: str) -> str:
    """Strip userinfo and query strings from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall-clock time."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
