"""Structured JSON logging for the SmartFit backend.

Every record carries a correlation id taken from a context variable so that a
single import request (API call, scrape, image download, store write) can be
followed through the logs.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}
_REDACTED_KEYS = frozenset({"user_id", "email", "password", "image_data", "description"})
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w\-]+\.[\w.\-]+")
_MAX_STRING_LENGTH = 300
_NOISY_LOGGERS = ("urllib3", "httpx", "multipart")


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_ATTRIBUTES or key in payload:
                continue
            payload[key] = redact_for_log(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Route the root logger through :class:`JsonFormatter`."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.root.handlers.clear()
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler])
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _redact_string(value: str) -> str:
    if value.startswith("data:"):
        media_type = value[5:].split(";", 1)[0] or "unknown"
        return f"[data-url {media_type}, {len(value)} chars]"
    value = _EMAIL_PATTERN.sub("[redacted-email]", value)
    if len(value) > _MAX_STRING_LENGTH:
        return value[:_MAX_STRING_LENGTH] + f"...[{len(value) - _MAX_STRING_LENGTH} more chars]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Scrub personal fields, summarize image payloads and clip page bodies.

    Retailer URLs are left intact; they are the main thing worth reading in
    scrape logs.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACTED_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return _redact_string(str(payload))


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures JSON output on first use if nobody else has."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id`` or the current one, minting a new id if neither exists."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Set a correlation id for the block and restore the previous one afterwards."""

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted structured fields and the active correlation id."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id around ``name`` and log how long it took.

    Failures are logged at DEBUG only; callers decide whether an exception is
    worth a warning.
    """

    logger = logging.getLogger(__name__)
    start = time.perf_counter()
    with correlation_context(attributes.pop("correlation_id", None)) as correlation_id:
        log_event(logger, logging.DEBUG, "operation_started", operation=name, **attributes)
        try:
            yield correlation_id
        except Exception:
            log_event(
                logger,
                logging.DEBUG,
                "operation_failed",
                operation=name,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        log_event(
            logger,
            logging.DEBUG,
            "operation_completed",
            operation=name,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
