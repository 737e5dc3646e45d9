"""Centralized logging configuration for ai-cli.

Every handler installed here redacts API keys: bearer tokens and
``sk-``-style keys are reduced to their first and last four characters
before a record is written, whichever formatter is in use.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from aicli.config import mask_api_key

_installed_handlers: list[logging.Handler] = []

_SECRET_PATTERNS = (
    re.compile(r"(?<=Bearer )[A-Za-z0-9._\-]{8,}"),
    re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}"),
)


def redact_secrets(text: str) -> str:
    """Mask anything shaped like an API key in a log line."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: mask_api_key(m.group(0)), text)
    return text


class RedactingFormatter(logging.Formatter):
    """Plain-text formatter that masks API keys in the rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        return redact_secrets(super().format(record))


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with provider context when the record carries it."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }
        provider = getattr(record, "provider", None)
        if provider:
            payload["provider"] = provider
        if record.exc_info:
            payload["exc"] = redact_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    json_format: bool = False,
) -> None:
    """Configure root logging with a stderr console handler + optional rotating file."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    # Already configured: only the level changes
    if _installed_handlers:
        for handler in _installed_handlers:
            handler.setLevel(numeric_level)
        return

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = "%H:%M:%S"
    formatter: logging.Formatter = (
        JsonFormatter() if json_format else RedactingFormatter(fmt, datefmt=datefmt)
    )

    # stdout carries command output, logs go to stderr
    console = logging.StreamHandler()
    console.setLevel(numeric_level)
    console.setFormatter(formatter)
    root.addHandler(console)
    _installed_handlers.append(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _installed_handlers.append(file_handler)
