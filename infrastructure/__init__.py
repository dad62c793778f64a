"""Infrastructure layer - Notification transport clients."""
from .notifications import SendGridConfig, SendGridNotifier

__all__ = [
    'SendGridConfig',
    'SendGridNotifier',
]
