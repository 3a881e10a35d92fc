"""Random periodic task-set generators for tests and experiments."""

import math
import random
from typing import List, Optional, Sequence

from schedsim.models import PeriodicTask, TaskSet
from schedsim.rational import Rational


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Split a total utilization into n random per-task shares.

    The shares are drawn uniformly over all non-negative n-vectors summing to
    ``u_total`` (the UUniFast method of Bini and Buttazzo, 2005), so no task
    is biased towards a large or small share. ``generate_taskset`` rounds
    them onto its execution-time grid afterwards.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError(f"Task count must be positive, got {n}")
    if u_total < 0:
        raise ValueError(f"Total utilization cannot be negative, got {u_total}")

    rng = random.Random(seed)
    shares = []
    left = u_total
    # One share per task but the last, which takes whatever is left.
    for remaining_tasks in range(n - 1, 0, -1):
        kept = left * rng.random() ** (1.0 / remaining_tasks)
        shares.append(left - kept)
        left = kept
    shares.append(left)
    return shares


def generate_taskset(
    n: int,
    target_utilization: float,
    period_min: int = 2,
    period_max: int = 20,
    periods: Optional[Sequence[int]] = None,
    deadline_factor_min: float = 1.0,
    deadline_factor_max: float = 1.0,
    max_start: int = 0,
    resolution: int = 10,
    seed: Optional[int] = None,
) -> TaskSet:
    """Generate a random task set with exact rational parameters.

    Periods are integers, either drawn log-uniformly from
    ``[period_min, period_max]`` or picked from ``periods`` when given (a
    small menu keeps the hyperperiod, and therefore simulations, short).
    Execution times and deadlines are multiples of ``1 / resolution``.

    Args:
        n: Number of tasks to generate.
        target_utilization: Target total utilization (sum of C/T).
        period_min: Minimum task period.
        period_max: Maximum task period.
        periods: Optional menu of periods to choose from instead.
        deadline_factor_min: Minimum ratio D/T.
        deadline_factor_max: Maximum ratio D/T.
        max_start: Largest integer release offset.
        resolution: Denominator of the execution-time and deadline grid.
        seed: Random seed for reproducibility.

    Returns:
        A TaskSet with n tasks. Deadlines are raised to the execution time
        where rounding would otherwise put them below it.

    Raises:
        ValueError: If parameters are invalid.
    """
    if periods is None and (period_min <= 0 or period_max <= 0 or period_min > period_max):
        raise ValueError("Invalid period range")
    if periods is not None and (not periods or min(periods) <= 0):
        raise ValueError("Period menu must hold positive values")
    if deadline_factor_min <= 0 or deadline_factor_max < deadline_factor_min:
        raise ValueError("Invalid deadline factor range")
    if deadline_factor_max > 1.0:
        raise ValueError("Deadline factor cannot exceed 1.0 (D must be <= T)")
    if max_start < 0:
        raise ValueError("Release offsets must be non-negative")
    if resolution <= 0:
        raise ValueError("Resolution must be positive")

    rng = random.Random(seed)
    utilizations = uunifast(n, target_utilization, seed=seed)

    tasks = []
    for i, u in enumerate(utilizations):
        if periods is not None:
            period = rng.choice(list(periods))
        else:
            period = round(math.exp(rng.uniform(math.log(period_min), math.log(period_max))))

        if deadline_factor_min == deadline_factor_max:
            deadline_factor = deadline_factor_min
        else:
            deadline_factor = rng.uniform(deadline_factor_min, deadline_factor_max)

        ticks = max(1, round(u * period * resolution))
        deadline_ticks = max(ticks, round(period * deadline_factor * resolution))

        tasks.append(PeriodicTask(
            start=rng.randint(0, max_start),
            deadline=Rational(deadline_ticks, resolution),
            period=period,
            execution=Rational(ticks, resolution),
            name=f"τ{i+1}",
        ))

    return TaskSet(tasks=tasks)
