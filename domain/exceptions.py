"""Host monitor error taxonomy.

ConfigurationError  - missing or invalid settings, fatal at startup
NotificationError   - delivery could not be confirmed, logged and skipped
UnknownHostError    - a host outside the configured set was referenced

Probe failures are not exceptions; they are the ``False`` result of a probe.
"""
from typing import Optional


class HostMonitorError(Exception):
    """Base class for host monitor errors."""


class ConfigurationError(HostMonitorError):
    """Raised when a setting is missing or cannot be parsed."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class NotificationError(HostMonitorError):
    """Raised by a notifier when the transport itself failed."""


class UnknownHostError(HostMonitorError, KeyError):
    """Raised when a host is not part of the registry."""

    def __init__(self, host: str) -> None:
        super().__init__(host)
        self.host = host

    def __str__(self) -> str:
        return f"host not monitored: {self.host}"
