"""Application layer - Monitoring services."""
from .services import HostMonitor

__all__ = [
    'HostMonitor',
]
