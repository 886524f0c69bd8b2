"""Structured JSON logging for the service."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

SERVICE_VERSION = "0.2.0"
LOG_LEVEL_ENV = "WORKERINDEX_LOG_LEVEL"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}

_state: dict[str, Any] = {}


def _level_name(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARN"
    if levelno >= logging.INFO:
        return "INFO"
    if levelno >= logging.DEBUG:
        return "DEBUG"
    return "TRACE"


def _parse_level(text: str) -> int:
    try:
        return _LEVELS[text.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown log level: {text!r}") from None


class JsonLogFormatter(logging.Formatter):
    """Formats each record as one JSON object: timestamp, level, fields and target."""

    def __init__(
        self, service_name: str | None = None, service_version: str = SERVICE_VERSION
    ) -> None:
        super().__init__()
        self.resource: dict[str, str] = (
            {"service.name": service_name, "service.version": service_version}
            if service_name is not None
            else {}
        )

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        fields: dict[str, Any] = {"message": record.getMessage()}
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="microseconds").replace("+00:00", "Z"),
            "level": _level_name(record.levelno),
            "fields": fields,
            "target": record.name,
        }
        if self.resource:
            payload["resource"] = dict(self.resource)
        return json.dumps(payload, ensure_ascii=False, default=str)


def init_telemetry(service_name: str, log_level: str = "info") -> logging.Handler:
    """Send root logging to standard output as JSON lines and return the handler.

    The level comes from the environment variable named by LOG_LEVEL_ENV when it
    holds a valid level, and otherwise from ``log_level``.
    """
    level = None
    from_env = os.environ.get(LOG_LEVEL_ENV)
    if from_env:
        try:
            level = _parse_level(from_env)
        except ValueError:
            level = None
    if level is None:
        level = _parse_level(log_level)

    shutdown_telemetry()
    root = logging.getLogger()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter(service_name))
    handler.setLevel(level)
    _state["previous_level"] = root.level
    _state["handler"] = handler
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def shutdown_telemetry() -> None:
    """Remove the handler installed by init_telemetry and restore the root level."""
    handler = _state.pop("handler", None)
    previous = _state.pop("previous_level", None)
    if handler is None:
        return
    root = logging.getLogger()
    root.removeHandler(handler)
    handler.flush()
    handler.close()
    if previous is not None:
        root.setLevel(previous)