"""Logging configuration."""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

from automation_bridge.config import get_settings

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_id(request_id: Optional[str]) -> None:
    """Bind a request ID to the current context."""
    _request_id.set(request_id)


def get_request_id() -> Optional[str]:
    """Get the request ID bound to the current context."""
    return _request_id.get()


class RequestIDFilter(logging.Filter):
    """Attach the current request ID to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def setup_logging() -> None:
    """Configure logging for the service."""
    settings = get_settings()

    logger = logging.getLogger("automation_bridge")
    logger.setLevel(settings.log_level)

    # Avoid stacking handlers when the app is created more than once
    if any(getattr(h, "_automation_bridge", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(settings.log_level)
    handler.addFilter(RequestIDFilter())
    handler._automation_bridge = True

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(f"automation_bridge.{name}")


def log_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    client_ip: Optional[str] = None,
    event_type: Optional[str] = None,
) -> None:
    """Log a completed HTTP request, tagged with the webhook event type if any."""
    logger = get_logger("access")
    level = logging.WARNING if status_code >= 500 else logging.INFO
    message = f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)"
    if event_type:
        message = f"{message} event={event_type}"
    logger.log(
        level,
        message,
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "client_ip": client_ip,
            "event_type": event_type,
        },
    )
