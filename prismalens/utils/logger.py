"""Structured logging utility with JSON output."""

import logging
import json
import sys
import os
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    # Fields that Python's logging adds automatically (exclude these)
    BUILTIN_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
        'taskName', 'message',
    }

    MAX_VALUE_CHARS = 500

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self.BUILTIN_ATTRS or key.startswith('_'):
                continue
            log_data[key] = self._sanitize(value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)

    def _sanitize(self, value: Any) -> Any:
        # Image payloads travel as bytes or data URLs; never dump them
        if isinstance(value, bytes):
            return f"<bytes: {len(value)} bytes>"
        if isinstance(value, str) and value.startswith("data:") and len(value) > self.MAX_VALUE_CHARS:
            return f"<data url: {len(value)} chars>"
        if isinstance(value, (list, tuple)):
            sanitized = [self._sanitize(item) for item in value]
            try:
                json.dumps(sanitized)
                return sanitized
            except (TypeError, ValueError):
                return str(sanitized)
        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            str_value = str(value)
            if len(str_value) > self.MAX_VALUE_CHARS:
                return str_value[:self.MAX_VALUE_CHARS] + "...[truncated]"
            return str_value


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, log_level, logging.INFO))

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

        logger.propagate = False

    return logger


def set_log_level(level: str):
    """Apply a configured level to every logger created so far."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    for name, candidate in logging.Logger.manager.loggerDict.items():
        if isinstance(candidate, logging.Logger) and name.startswith("prismalens"):
            candidate.setLevel(resolved)
