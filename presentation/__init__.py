"""Presentation layer - Command line interface."""
from .cli import MonitorCommand

__all__ = [
    "MonitorCommand",
]
