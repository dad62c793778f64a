"""Domain entities."""
from .host import HostState
from .notification import Notification

__all__ = [
    'HostState',
    'Notification',
]
