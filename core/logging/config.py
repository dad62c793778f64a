from __future__ import annotations

import logging
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import Optional, Union

from .formatter import ConsoleFormatter, JSONFormatter
from .logger import to_level

_listener: Optional[QueueListener] = None


def bootstrap_logging(
    *,
    service: str = "hostmonitor",
    level: Union[str, int] = "INFO",
    log_dir: Optional[Path] = None,
    log_file_name: str = "hostmonitor.jsonl",
    console: bool = True,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> None:
    """Install console and rotating JSON-lines handlers on the root logger.

    File writes go through a QueueHandler so that a slow disk never blocks
    the event loop.
    """
    global _listener
    shutdown_logging()

    root = logging.getLogger()
    root.handlers.clear()
    lvl = to_level(level)
    root.setLevel(lvl)

    if console:
        stream = logging.StreamHandler()
        stream.setLevel(lvl)
        stream.setFormatter(ConsoleFormatter())
        root.addHandler(stream)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_dir / log_file_name),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(lvl)
        file_handler.setFormatter(JSONFormatter())
        q: Queue[logging.LogRecord] = Queue(-1)
        root.addHandler(QueueHandler(q))
        _listener = QueueListener(q, file_handler, respect_handler_level=True)
        _listener.start()

    logging.getLogger(__name__).info(
        "logging-ready", extra={"service": service, "fields": {"level": logging.getLevelName(lvl), "log_dir": str(log_dir)}}
    )


def shutdown_logging() -> None:
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
