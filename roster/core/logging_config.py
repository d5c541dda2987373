"""
Structured JSON logging for the roster app.

Every log line is a single JSON object (timestamp, level, message, channel,
context, extra). Channels: http, store, storage. The request id set by the
HTTP middleware is attached to every entry emitted while that request runs.
"""

from __future__ import annotations

from contextvars import ContextVar
from datetime import datetime, timezone
import json
import logging
import uuid

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

CHANNELS = ("http", "store", "storage")


class StructuredJsonFormatter(logging.Formatter):
    """Render a LogRecord as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {}),
            },
            "extra": getattr(record, "extra_data", {}) or {},
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Install the JSON formatter on the root logger and set channel levels."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"roster.{channel}").setLevel(numeric_level)
    return root_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"roster.{channel}")


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    context: dict | None = None,
    extra_data: dict | None = None,
) -> None:
    """
    Emit a structured entry with business context (record_id, storage_key)
    and extra metadata (duration_ms, count, ...).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": logger.name.split(".")[-1],
        },
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())
