"""Domain layer - Host state, notifications, enums, and interfaces."""
from .entities import HostState, Notification
from .enums import AlertKind, Transition
from .exceptions import (
    HostMonitorError,
    ConfigurationError,
    NotificationError,
    UnknownHostError,
)
from .interfaces import INotifier, IProber

__all__ = [
    # Entities
    'HostState',
    'Notification',
    # Enums
    'AlertKind',
    'Transition',
    # Errors
    'HostMonitorError',
    'ConfigurationError',
    'NotificationError',
    'UnknownHostError',
    # Interfaces
    'INotifier',
    'IProber',
]
