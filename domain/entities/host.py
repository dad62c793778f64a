"""Host entity holding the monitored state of one configured host."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True, slots=True)
class HostState:
    """Point-in-time state of a monitored host.

    Values are immutable; the registry swaps whole states so that a reader
    never observes a half-updated host.
    """

    host: str
    up: bool = True
    fail_count: int = 0
    last_alert_at: Optional[datetime] = None

    @property
    def status(self) -> str:
        return "UP" if self.up else "DOWN"

    def alert_due(self, now: datetime, throttle: timedelta) -> bool:
        """Whether the throttle window since the last alert has elapsed."""
        if self.last_alert_at is None:
            return True
        return now - self.last_alert_at > throttle

    def evolve(self, **changes) -> "HostState":
        return replace(self, **changes)
