"""
Logging Configuration

Structured logging setup with JSON output for production and a
human-readable format everywhere else.
"""
import logging
import sys
from typing import Any, Dict
import json
from datetime import datetime


# Extra attributes copied from log records into JSON output
_CONTEXT_FIELDS = ("tenant_id", "user_id", "path", "method", "event_type", "reason", "client")


class JSONFormatter(logging.Formatter):
    """JSON log formatter: one machine-readable object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for structured logging

    NOTE: Call this once at application startup.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    # Reduce noise from noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_security_event(event_type: str, details: Dict[str, Any], logger: logging.Logger) -> None:
    """
    Log security-related events at WARNING level.

    Event types:
    - failed_login: wrong email or password
    - invalid_token: missing, malformed, expired or tampered bearer token
    - forbidden: non-admin attempted an admin-only action
    - note_limit_reached: free-plan tenant hit its note cap
    - rate_limit_exceeded: client exceeded its request budget
    """
    log_data = {
        "security_event": True,
        "event_type": event_type,
        **details
    }

    logger.warning(f"SECURITY EVENT: {event_type}", extra=log_data)
