"""
Structured logging configuration and per-request access logging.

Every line is `timestamp | LEVEL | logger:func:line | message`. Module loggers
live under the `app.` namespace (`get_logger("orders")` -> `app.orders`).
"""

import logging
import sys
import time
from datetime import datetime, timezone

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import get_settings


class StructuredFormatter(logging.Formatter):
    """Formatter emitting `timestamp | LEVEL | logger:func:line | message`."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_entry = (
            f"{timestamp} | {record.levelname:<8} | "
            f"{record.name}:{record.funcName}:{record.lineno} | "
            f"{record.getMessage()}"
        )
        if record.exc_info and record.exc_info[1]:
            log_entry += f" | EXCEPTION: {self.formatException(record.exc_info)}"
        return log_entry


_configured = False


def setup_logging() -> None:
    """Configure application-wide logging. Safe to call more than once."""
    global _configured
    if _configured:
        return
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
    logging.getLogger("app").info("Logging system initialized (level=%s)", settings.LOG_LEVEL)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger for a module."""
    return logging.getLogger(f"app.{name}")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One line per API request. The dashboard polls constantly, so normal
    requests log at DEBUG; slow requests and 5xx responses are promoted.
    """

    def __init__(self, app, slow_request_ms: int | None = None):
        super().__init__(app)
        if slow_request_ms is None:
            slow_request_ms = get_settings().SLOW_REQUEST_MS
        self.slow_request_ms = slow_request_ms
        self.logger = get_logger("http")

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            self.logger.error(
                "%s %s -> unhandled exception (%dms)",
                request.method, request.url.path, elapsed_ms,
            )
            raise
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        if response.status_code >= 500:
            level = logging.ERROR
        elif elapsed_ms >= self.slow_request_ms:
            level = logging.WARNING
        else:
            level = logging.DEBUG
        self.logger.log(
            level, "%s %s -> %d (%dms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response
