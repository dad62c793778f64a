"""Presentation CLI exports."""
from .monitor_command import MonitorCommand, build_parser, parse_args, run_manual_triggers

__all__ = [
    "MonitorCommand",
    "build_parser",
    "parse_args",
    "run_manual_triggers",
]
