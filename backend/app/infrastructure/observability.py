"""Structured Logging — JSON lines in production, readable text in development.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Known extra keys (error_code, path, entity, identity, ...) are emitted
      when present on the record; unknown extras are dropped
    - setup_logging is idempotent: repeated calls replace, never stack, handlers

Design Decisions:
    - stdlib logging with a custom formatter, no logging library
    - Same extra keys in both formats so a dev log reads like prod
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_KEYS = (
    "error_code", "path", "method", "status_code",
    "entity", "entity_id", "identity", "failure_count",
)

_HANDLER_NAME = "backoffice"


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Plain formatter that appends extras as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the back-office handler on the root logger and return it."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
