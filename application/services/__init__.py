"""Application services root exports."""
from .monitor import HostMonitor, HostRegistry, Reporter, Scheduler, StateEvaluator, TcpProber

__all__ = [
    "HostMonitor",
    "HostRegistry",
    "Reporter",
    "Scheduler",
    "StateEvaluator",
    "TcpProber",
]
