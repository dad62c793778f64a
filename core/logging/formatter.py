from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict

from .context import current_fields

_COLORS = {
    "TRACE": "\033[90m",
    "DEBUG": "\033[37m",
    "INFO": "\033[36m",
    "SUCCESS": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields = getattr(record, "fields", None)
    if fields is None:
        return current_fields()
    return fields


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds")


class ConsoleFormatter(logging.Formatter):
    """One line per record: time | level | service | origin | event key=value..."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        fields = " ".join(f"{k}={v}" for k, v in _fields(record).items())
        parts = [
            _timestamp(record),
            f"{record.levelname:<8}",
            getattr(record, "service", None) or "-",
            f"{record.module}:{record.funcName}:{record.lineno}",
            record.getMessage(),
        ]
        if fields:
            parts.append(fields)
        line = " | ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if not self.color:
            return line
        return f"{_COLORS.get(record.levelname, '')}{line}{_RESET}"


class JSONFormatter(logging.Formatter):
    """JSON-lines records for the rotating log file."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "service": getattr(record, "service", None),
            "logger": record.name,
            "function": record.funcName,
            "line_number": record.lineno,
            "thread_id": record.thread,
            "event": record.getMessage(),
        }
        fields = _fields(record)
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))
