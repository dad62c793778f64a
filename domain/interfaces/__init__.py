"""Domain interfaces."""
from .notifier import INotifier, IProber

__all__ = [
    'INotifier',
    'IProber',
]
