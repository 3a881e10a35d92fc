"""Utilization-based feasibility tests and simulation horizon.

Two classic tests are applied to a periodic task set on one processor:

Necessary test (utilization):
    U = sum_i C_i / T_i
    U > 1  =>  the task set is infeasible under any policy.

Sufficient test (density):
    Delta = sum_i C_i / D_i
    Delta <= 1  =>  the task set is feasible under EDF.

When neither fires (U <= 1 and Delta > 1) the verdict is undetermined and the
actual behavior has to be observed by simulating one representative window.
That window is given by the hyperperiod L = lcm(T_1, ..., T_n) and the
largest release offset s_max: the schedule from s_max + L onward repeats with
period L, so [0, s_max + 2L] covers the transient part plus one full
steady-state hyperperiod.

All sums are computed with exact rationals; ``U == 1`` is never mistaken for
``U > 1`` because of rounding.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from schedsim.models import TaskSet
from schedsim.rational import ONE, ZERO, Rational, lcm

logger = logging.getLogger(__name__)

INFEASIBLE = "infeasible"
FEASIBLE = "feasible"
UNDETERMINED = "undetermined"

Term = Tuple[Rational, Rational]


@dataclass(frozen=True)
class FeasibilityReport:
    """Outcome of the two utilization-based tests.

    Attributes:
        infeasible: The necessary test fired (sum of C/T exceeds 1).
        feasible: The sufficient test fired (sum of C/D is at most 1).
        utilization: Exact sum of C/T.
        density: Exact sum of C/D.
        utilization_terms: ``(C, T)`` pair per task, in task order.
        density_terms: ``(C, D)`` pair per task, in task order.
    """
    infeasible: bool
    feasible: bool
    utilization: Rational
    density: Rational
    utilization_terms: List[Term]
    density_terms: List[Term]

    @property
    def verdict(self) -> str:
        """``"infeasible"``, ``"feasible"`` or ``"undetermined"``."""
        if self.infeasible:
            return INFEASIBLE
        if self.feasible:
            return FEASIBLE
        return UNDETERMINED

    @property
    def needs_simulation(self) -> bool:
        return not self.infeasible and not self.feasible


@dataclass(frozen=True)
class Horizon:
    """Simulation window for a task set.

    Attributes:
        start: First simulated instant (always zero).
        stop: Last simulated instant, ``max_start + 2 * hyperperiod``.
        transient: ``max_start + hyperperiod``; after this instant the
            schedule repeats with period ``hyperperiod``.
        hyperperiod: Least common multiple of all periods.
        max_start: Largest release offset.
    """
    start: Rational
    stop: Rational
    transient: Rational
    hyperperiod: Rational
    max_start: Rational


def check_feasibility(taskset: TaskSet) -> FeasibilityReport:
    """Run the necessary and sufficient utilization tests.

    Args:
        taskset: The task set to analyze.

    Returns:
        A FeasibilityReport. With D <= T for every task the two flags are
        never both true, since sum(C/D) >= sum(C/T). Both may be false, in
        which case a simulation is needed.
    """
    utilization_terms = [(t.execution, t.period) for t in taskset]
    density_terms = [(t.execution, t.deadline) for t in taskset]

    utilization = sum((c / p for c, p in utilization_terms), ZERO)
    density = sum((c / d for c, d in density_terms), ZERO)

    logger.debug("utilization sum: %s", format_sum(utilization_terms, utilization))
    logger.debug("density sum: %s", format_sum(density_terms, density))

    return FeasibilityReport(
        infeasible=utilization > ONE,
        feasible=density <= ONE,
        utilization=utilization,
        density=density,
        utilization_terms=utilization_terms,
        density_terms=density_terms,
    )


def format_sum(terms: List[Term], total: Rational) -> str:
    """Render a test sum for display, e.g. ``"1/8 + 1/4 = 3/8 <= 1"``."""
    parts = " + ".join(str(numerator / denominator) for numerator, denominator in terms)
    comparison = "<= 1" if total <= ONE else "> 1"
    return f"{parts} = {total} {comparison}"


def compute_horizon(taskset: TaskSet) -> Horizon:
    """Compute the simulation window ``[0, max_start + 2L]``.

    Args:
        taskset: The task set to simulate.

    Returns:
        The Horizon, with ``L`` the exact least common multiple of the
        periods. An empty task set yields a zero-length window.
    """
    hyperperiod = lcm(*(t.period for t in taskset))
    max_start = taskset.max_start
    return Horizon(
        start=ZERO,
        stop=max_start + 2 * hyperperiod,
        transient=max_start + hyperperiod,
        hyperperiod=hyperperiod,
        max_start=max_start,
    )
