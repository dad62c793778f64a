"""Configuration: raw environment settings and the typed monitor config."""
from .settings import Settings, settings
from .monitor_config import MonitorConfig, split_list, parse_report_time

__all__ = [
    'Settings',
    'settings',
    'MonitorConfig',
    'split_list',
    'parse_report_time',
]
