"""
Structured Logging — JSON Output for Production

Configures Python logging to emit structured JSON logs.
Each log entry includes timestamp, level, module, and
any additional context fields.

Usage:
    from biaswatch.logging import get_logger
    logger = get_logger("monitor")
    logger.info("Chain analyzed", extra={"chain_id": "c-1", "biases_count": 2})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from biaswatch.config import settings


# Context fields copied from the record onto the JSON entry when present
EXTRA_FIELDS = (
    "chain_id", "bias_type", "user_id", "alert_id", "duration_ms",
    "biases_count", "strategy", "weight", "sensitivity", "error",
    "error_type",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """Configure the biaswatch logger. Call once at host startup."""
    level = (level or settings.LOG_LEVEL).upper()
    fmt = fmt or settings.LOG_FORMAT

    root = logging.getLogger("biaswatch")
    root.setLevel(getattr(logging, level, logging.INFO))

    # Clear existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the biaswatch namespace."""
    return logging.getLogger(f"biaswatch.{name}")
