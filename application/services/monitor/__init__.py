from .models import Evaluation
from .prober import TcpProber
from .host_registry import HostRegistry
from .state_evaluator import StateEvaluator
from .scheduler import PeriodicJob, Scheduler, initial_report_delay
from .reporter import Reporter
from .host_monitor import HostMonitor

__all__ = [
    "Evaluation",
    "TcpProber",
    "HostRegistry",
    "StateEvaluator",
    "PeriodicJob",
    "Scheduler",
    "initial_report_delay",
    "Reporter",
    "HostMonitor",
]
