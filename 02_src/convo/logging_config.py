"""Structured logging for the relay: JSON lines to file, JSON or text to console."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_LOG_PATH

# Context keys lifted to the top level of every JSON line
PROMOTED_KEYS = ("conversation_id", "event_id")

_SECRET_MARKERS = ("token", "api_key", "secret", "authorization")

# Chatty client libraries
_QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "aiosqlite", "uvicorn.access")


def _redact(context: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***" if any(marker in key.lower() for marker in _SECRET_MARKERS) else value
        for key, value in context.items()
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record; Arabic text is kept readable."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            context = _redact(context)
            for key in PROMOTED_KEYS:
                if context.get(key) is not None:
                    log_data[key] = context[key]
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console lines with context appended as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            pairs = " ".join(f"{k}={v}" for k, v in _redact(context).items())
            line = f"{line} [{pairs}]"
        return line


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console_format: str | None = None,
) -> None:
    """
    Configure root logging for the relay.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to LOG_LEVEL env var or INFO.
        log_file: Rotating JSON log path. Defaults to 04_logs/app.log;
                  an empty string disables the file handler.
        console_format: "json" or "text". Defaults to LOG_FORMAT env var or json.
    """
    log_level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    console_format = (console_format or os.getenv("LOG_FORMAT") or "json").lower()
    if log_file is None:
        log_file = str(DEFAULT_LOG_PATH)

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "text" if console_format == "text" else "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "convo.logging_config.JSONFormatter"},
                "text": {"()": "convo.logging_config.ConsoleFormatter"},
            },
            "handlers": handlers,
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            "root": {"level": log_level, "handlers": list(handlers)},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; use extra={"context": {...}} for structured fields."""
    return logging.getLogger(name)
