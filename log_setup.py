"""
Logging for the shell: plain text lines, or one JSON object per line.

Dispatch records carry ``event``/``subscribers`` extras and stack records a
``prop`` extra; the JSON form lifts them into top-level keys.
"""

from __future__ import annotations

import json
import logging

PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
EVENT_FIELDS = ("event", "prop", "subscribers")


class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EVENT_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=repr)


def configure_logger(name: str = "", level: str = "WARNING", structured: bool = False) -> logging.Logger:
    """Install a single stderr handler on ``name`` ("" is the root logger)."""
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
    # Replace, so configuring twice doesn't print every line twice.
    logger.handlers = [handler]
    return logger
