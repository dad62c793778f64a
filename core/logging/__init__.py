"""Structured logging: bootstrap, formatters, and context binding."""
from .config import bootstrap_logging, shutdown_logging
from .context import log_context
from .logger import LogLevel, StructuredLogger, get_logger

__all__ = [
    "bootstrap_logging",
    "shutdown_logging",
    "log_context",
    "LogLevel",
    "StructuredLogger",
    "get_logger",
]
