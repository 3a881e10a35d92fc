"""schedsim: feasibility analysis and simulation of periodic real-time tasks.

This package checks periodic task sets on a single processor against the
utilization-based feasibility tests and, when those are inconclusive,
simulates the dispatch timeline under EDF, Deadline-Monotonic or
Rate-Monotonic priorities using exact rational time.
"""

from schedsim.rational import Rational, as_rational
from schedsim.models import PeriodicTask, TaskSet, TaskState
from schedsim.analysis import FeasibilityReport, Horizon, check_feasibility, compute_horizon
from schedsim.policies import DeadlineMonotonic, EarliestDeadlineFirst, RateMonotonic, get_policy
from schedsim.simulator import EventKind, SimulationEvent, SimulationResult, simulate

__version__ = "0.1.0"
__all__ = [
    "Rational",
    "as_rational",
    "PeriodicTask",
    "TaskSet",
    "TaskState",
    "FeasibilityReport",
    "Horizon",
    "check_feasibility",
    "compute_horizon",
    "EarliestDeadlineFirst",
    "DeadlineMonotonic",
    "RateMonotonic",
    "get_policy",
    "EventKind",
    "SimulationEvent",
    "SimulationResult",
    "simulate",
]
