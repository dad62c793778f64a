"""Per-host state transitions produced by a probe evaluation."""
from enum import Enum


class Transition(Enum):
    """Outcome of applying one probe result to a host's state."""

    WENT_DOWN = "went_down"    # UP   -> DOWN
    STILL_DOWN = "still_down"  # DOWN -> DOWN
    RECOVERED = "recovered"    # DOWN -> UP
    STILL_UP = "still_up"      # UP   -> UP
    FORCED_DOWN = "forced_down"
