"""Domain enumerations."""
from .alert_kind import AlertKind
from .transition import Transition

__all__ = [
    'AlertKind',
    'Transition',
]
