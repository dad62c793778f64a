"""Infrastructure notification transports."""
from .sendgrid_notifier import SendGridConfig, SendGridNotifier

__all__ = [
    'SendGridConfig',
    'SendGridNotifier',
]
