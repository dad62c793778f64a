from __future__ import annotations

from datetime import datetime, timedelta

from domain.entities import HostState
from domain.enums import AlertKind, Transition
from .models import Evaluation


class StateEvaluator:
    """Two-state (UP/DOWN) machine applied to one probe result at a time.

    | up    | reachable | result                                             |
    |-------|-----------|----------------------------------------------------|
    | True  | False     | DOWN, fail+1, CRITICAL unless throttled             |
    | False | True      | UP, fail=0, RECOVERY always                         |
    | False | False     | DOWN, fail+1, CRITICAL only once the window elapsed |
    | True  | True      | unchanged                                           |

    Evaluation is pure: it returns the next state and leaves storing it to
    ``HostRegistry.apply``.
    """

    def __init__(self, throttle_window: timedelta) -> None:
        self.throttle_window = throttle_window

    def evaluate(self, state: HostState, reachable: bool, now: datetime) -> Evaluation:
        if state.up and not reachable:
            return self._failure(Transition.WENT_DOWN, state, now)
        if not state.up and reachable:
            return Evaluation(
                Transition.RECOVERED,
                previous=state,
                state=state.evolve(up=True, fail_count=0),
                alert=AlertKind.RECOVERY,
            )
        if not reachable:
            return self._failure(Transition.STILL_DOWN, state, now)
        return Evaluation(Transition.STILL_UP, previous=state, state=state)

    def force_down(self, state: HostState, now: datetime) -> Evaluation:
        """Operator override: DOWN with an unthrottled CRITICAL alert."""
        return Evaluation(
            Transition.FORCED_DOWN,
            previous=state,
            state=state.evolve(up=False, last_alert_at=now),
            alert=AlertKind.CRITICAL,
        )

    def _failure(self, transition: Transition, state: HostState, now: datetime) -> Evaluation:
        nxt = state.evolve(up=False, fail_count=state.fail_count + 1)
        if not state.alert_due(now, self.throttle_window):
            return Evaluation(transition, previous=state, state=nxt)
        return Evaluation(
            transition,
            previous=state,
            state=nxt.evolve(last_alert_at=now),
            alert=AlertKind.CRITICAL,
        )
