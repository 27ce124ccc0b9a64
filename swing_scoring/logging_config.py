"""
Logging setup for the Swing Scoring service.

Development runs get a readable single-line format that also shows the
swing context (player, assessment, metric) attached through ``extra=``.
On Cloud Run (``CLOUD_RUN=true``) every record is emitted as one JSON
object so Cloud Logging can index severity and context fields.
"""
import json
import logging
import sys
import os
from typing import Optional


# Swing context passed via logger.x(..., extra={...})
CONTEXT_FIELDS = ("player_name", "assessment_type", "metric_name", "request_id")

DEV_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEV_DATEFMT = '%Y-%m-%d %H:%M:%S'


def _context(record: logging.LogRecord) -> dict:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    # Unknown names fall back to INFO rather than failing at import time
    return getattr(logging, name, logging.INFO)


class ContextFormatter(logging.Formatter):
    """Readable formatter that appends swing context as key=value pairs."""

    def __init__(self):
        super().__init__(DEV_FORMAT, datefmt=DEV_DATEFMT)

    def format(self, record):
        line = super().format(record)
        context = _context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON for Cloud Logging."""

    def format(self, record):
        log_obj = {
            'timestamp': self.formatTime(record, '%Y-%m-%dT%H:%M:%S.%fZ'),
            'severity': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        log_obj.update(_context(record))

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def configure_logger(name: str, formatter: logging.Formatter, level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stdout handler with ``formatter`` to the named logger.

    Loggers that already have a handler are returned unchanged, so modules
    calling this at import time never stack duplicate handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, JSON on Cloud Run and readable elsewhere."""
    is_cloud = os.getenv("CLOUD_RUN", "false").lower() == "true"
    formatter = JsonFormatter() if is_cloud else ContextFormatter()
    return configure_logger(name, formatter)
