from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.entities import HostState
from domain.enums import AlertKind, Transition


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Outcome of applying one probe result (or a manual override) to a host."""
    transition: Transition
    previous: HostState
    state: HostState
    alert: Optional[AlertKind] = None

    @property
    def host(self) -> str:
        return self.state.host
