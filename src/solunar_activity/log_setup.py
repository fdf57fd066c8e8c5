"""Logging setup for command-line execution."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

LOGGER_NAME = "solunar_activity"


class SessionFilter(logging.Filter):
    """Stamps every record with the CLI run's session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id
        return True


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per record, tagged with module and session id when known."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        session_id = getattr(record, "session_id", None)
        if session_id is not None:
            event["session_id"] = session_id
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    session_id: str | None = None,
) -> logging.Logger:
    """Configure the package logger once; child module loggers inherit its handler.

    Repeated calls keep the existing handler and only swap the session id.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)

    for handler in logger.handlers:
        for existing in [f for f in handler.filters if isinstance(f, SessionFilter)]:
            handler.removeFilter(existing)
        if session_id is not None:
            handler.addFilter(SessionFilter(session_id))
    return logger
