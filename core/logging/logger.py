from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Callable, Dict, Optional, Union

from .context import current_fields


class LogLevel(IntEnum):
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    SUCCESS = 25
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE, "TRACE")
logging.addLevelName(LogLevel.SUCCESS, "SUCCESS")


def to_level(value: Union[int, str]) -> int:
    """Resolve a level name (including TRACE/SUCCESS) or number; unknown names fall back to INFO."""
    if isinstance(value, int):
        return value
    try:
        return int(LogLevel[value.strip().upper()])
    except KeyError:
        return logging.INFO


Message = Union[str, Callable[[], str]]


class StructuredLogger:
    """Thin wrapper over :mod:`logging` with lazy messages and structured fields.

    ``extra`` is merged over the bound log context and carried on the record
    as ``record.fields``, so the formatters can render it without colliding
    with LogRecord attributes and the context survives the hop to the file
    listener thread.
    """

    def __init__(self, logger: logging.Logger, service: Optional[str] = None) -> None:
        self._logger = logger
        self._service = service

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: Message, *, extra: Optional[Dict[str, Any]] = None, exc_info: Any = None) -> None:
        if not self._logger.isEnabledFor(level):
            return
        message = msg() if callable(msg) else msg
        self._logger.log(
            level,
            message,
            extra={"service": self._service, "fields": {**current_fields(), **(extra or {})}},
            exc_info=exc_info,
            stacklevel=3,
        )

    def trace(self, msg: Message, **kwargs: Any) -> None:
        self._log(LogLevel.TRACE, msg, **kwargs)

    def debug(self, msg: Message, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: Message, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def success(self, msg: Message, **kwargs: Any) -> None:
        self._log(LogLevel.SUCCESS, msg, **kwargs)

    def warning(self, msg: Message, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: Message, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg: Message, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: Message, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, **kwargs)


def get_logger(name: str, *, service: Optional[str] = None) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name), service=service)
