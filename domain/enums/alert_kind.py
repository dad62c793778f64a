"""Kinds of outbound notifications."""
from enum import Enum


class AlertKind(Enum):
    """Message kinds handed to the notifier.

    Only CRITICAL is subject to the per-host throttle window.
    """

    CRITICAL = "critical"
    RECOVERY = "recovery"
    REPORT = "report"

    @property
    def label(self) -> str:
        """Get the upper-case label used in message headers."""
        return self.name
