"""Structured logging configuration for the store and the client."""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Request ID текущего HTTP запроса (для трейсинга N+1 последовательности)
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Атрибуты LogRecord, которые не попадают в "extra"
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def _record_extra(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Output format:
    {
        "timestamp": "2026-10-19T12:00:00.000000+00:00",
        "level": "INFO",
        "logger": "nplus_tasks.services.task",
        "message": "Task created",
        "request_id": "abc-123",
        "extra": {"task_id": 6, "tags": ["shopping"]}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        extra = _record_extra(record)
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        request_id = request_id_var.get()
        req_id_str = f"[{request_id[:8]}] " if request_id else ""

        line = (
            f"{timestamp} | {record.levelname:8} | "
            f"{req_id_str}{record.name}: {record.getMessage()}"
        )

        extra = _record_extra(record)
        if extra:
            line += " " + " ".join(f"{key}={value}" for key, value in extra.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(
    log_level: str = "INFO", log_format: str = "json", database_echo: bool = False
) -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for structured output, "simple" for human-readable
        database_echo: Keep SQLAlchemy engine logs at INFO
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        JSONFormatter() if log_format.lower() == "json" else SimpleFormatter()
    )
    root_logger.addHandler(console_handler)

    # Меньше шума от сторонних библиотек
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if database_echo else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually __name__)."""
    return logging.getLogger(name)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())
