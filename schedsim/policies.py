"""Scheduling policies: which released task runs next.

A policy is a pure selection rule. Given the task set, the per-task runtime
state and the current instant, it returns the 0-based index of the task to
dispatch, or ``None`` to leave the processor idle. Policies never mutate the
state they are given and only consider tasks whose current instance is
released.

Every policy ranks released tasks by a key (smaller runs first) and scans
them in task-set order, replacing the running best only on a strictly
smaller key. Ties therefore go to the lowest index.

The running best starts at ``PRIORITY_SENTINEL`` (1e9) rather than an
unbounded maximum, so a task whose key is at least 1e9 is never selected.
"""

from typing import Dict, Optional, Sequence

from schedsim.models import PeriodicTask, TaskState
from schedsim.rational import Rational

PRIORITY_SENTINEL = Rational(10 ** 9)


class SchedulingPolicy:
    """Base class for a priority policy.

    Subclasses set ``name`` and ``label`` and implement ``priority_key``.
    """
    name = ""
    label = ""

    def priority_key(self, task: PeriodicTask, state: TaskState, time: Rational) -> Rational:
        raise NotImplementedError

    def select(
        self,
        tasks: Sequence[PeriodicTask],
        states: Sequence[TaskState],
        time: Rational,
    ) -> Optional[int]:
        """Return the index of the task to dispatch at ``time``, or None.

        Args:
            tasks: Tasks in task-set order.
            states: Runtime state aligned with ``tasks``.
            time: The current instant.
        """
        best = PRIORITY_SENTINEL
        index = None
        for i, (task, state) in enumerate(zip(tasks, states)):
            if not state.released:
                continue
            key = self.priority_key(task, state, time)
            if key < best:
                best = key
                index = i
        return index

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EarliestDeadlineFirst(SchedulingPolicy):
    """Dynamic priority keyed on the phase within the relative deadline.

    The key is ``(time - last_release) mod deadline``: the time elapsed since
    the current instance was released, wrapped into ``[0, deadline)``.
    """
    name = "edf"
    label = "Earliest Deadline First"

    def priority_key(self, task: PeriodicTask, state: TaskState, time: Rational) -> Rational:
        return (time - state.last_release) % task.deadline


class DeadlineMonotonic(SchedulingPolicy):
    """Fixed priority: the shortest relative deadline runs first."""
    name = "dm"
    label = "Deadline Monotonic"

    def priority_key(self, task: PeriodicTask, state: TaskState, time: Rational) -> Rational:
        return task.deadline


class RateMonotonic(SchedulingPolicy):
    """Fixed priority: the shortest period runs first."""
    name = "rm"
    label = "Rate Monotonic"

    def priority_key(self, task: PeriodicTask, state: TaskState, time: Rational) -> Rational:
        return task.period


POLICIES: Dict[str, SchedulingPolicy] = {
    policy.name: policy
    for policy in (EarliestDeadlineFirst(), DeadlineMonotonic(), RateMonotonic())
}


def get_policy(name: str) -> SchedulingPolicy:
    """Look up a policy by its short name (``edf``, ``dm`` or ``rm``).

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return POLICIES[name.lower()]
    except KeyError:
        known = ", ".join(sorted(POLICIES))
        raise ValueError(f"Unknown scheduling policy '{name}'. Expected one of: {known}") from None
