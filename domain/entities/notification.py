"""Rendered notification entity."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import AlertKind


@dataclass(frozen=True, slots=True)
class Notification:
    """A message ready for the notifier: subject plus plain-text body."""

    kind: AlertKind
    subject: str
    body: str
    created_at: datetime
    host: Optional[str] = None
