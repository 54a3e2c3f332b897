"""One-line JSON log records for the weather-lab CLI and API server.

OpenWeatherMap credentials travel as an ``appid`` query parameter, so httpx
error text and tracebacks can carry them. Every message, ``context`` extra and
formatted exception goes through the redaction helpers before it is written.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_for_logging, sanitize_text

DEFAULT_LOGGER_NAME = "weather_lab"


class JsonConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        # Callers attach structured data with extra={"context": {...}},
        # e.g. Settings.safe_summary() at startup.
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            event["context"] = sanitize_for_logging(context)
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME, level: int | str = logging.INFO
) -> logging.Logger:
    """Return the package logger writing JSON lines to stderr.

    ``create_app`` and ``cli.main`` both call this, and uvicorn may build the
    app more than once per process, so the handler is attached only on the
    first call. Later calls just update the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Keep records out of uvicorn's root handlers.
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
