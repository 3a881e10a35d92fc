"""Discrete-event simulation of a periodic task set on one processor.

The simulator walks simulated time from ``start`` to ``stop`` (inclusive).
At each visited instant three phases run in order:

1. Deadline check: every task whose current instance has its absolute
   deadline in ``(previous instant, now]`` reports a hit or a miss, ordered
   by deadline and then by task number, and stamped with the deadline
   instant itself. At the first instant only deadlines
   falling exactly on it are checked. An instance misses if it was never
   dispatched, or if it was the one running over the slice that just ended
   and its deadline fell strictly inside that slice. One miss makes the
   whole run infeasible.
2. Release: every task with a release instant exactly here releases a new
   instance.
3. Dispatch: the policy picks a released task and time advances by its
   execution time. Execution is not preempted.

If nothing is released the processor idles and time advances by the
smallest strictly positive ``(now - start_i) mod deadline_i`` over all
tasks. That is an advance by an amount, not a jump to the next release, so
release instants that fall inside a slice or an idle jump are not visited.

Events carry 1-based task numbers and are emitted in non-decreasing time
order; within one instant deadline events precede release events, which
precede the dispatch or idle event.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from schedsim.analysis import compute_horizon
from schedsim.errors import NonTerminatingIdle
from schedsim.models import PeriodicTask, TaskSet
from schedsim.policies import SchedulingPolicy, get_policy
from schedsim.rational import ZERO, Rational, RationalLike, as_rational

logger = logging.getLogger(__name__)

# Stand-in for an unbounded advance. Idle advances of this size or more are
# ignored.
IDLE_JUMP_SENTINEL = Rational(10 ** 9)


class EventKind(enum.Enum):
    RELEASE = "release"
    DEADLINE_HIT = "deadline_hit"
    DEADLINE_MISS = "deadline_miss"
    DISPATCH = "dispatch"
    IDLE = "idle"


@dataclass(frozen=True)
class SimulationEvent:
    """One entry of the simulation log.

    Attributes:
        kind: What happened.
        task: 1-based task number, None for idle events.
        time: Instant at which it happened.
    """
    kind: EventKind
    task: Optional[int]
    time: Rational

    def describe(self) -> str:
        """Return a human-readable log line for this event."""
        if self.kind is EventKind.RELEASE:
            text = f"Process {self.task} queued."
        elif self.kind is EventKind.DEADLINE_HIT:
            text = f"Process {self.task}'s deadline was met."
        elif self.kind is EventKind.DEADLINE_MISS:
            text = f"Process {self.task}'s deadline was missed!"
        elif self.kind is EventKind.DISPATCH:
            text = f"Process {self.task} scheduled."
        else:
            text = "Processor idle."
        return f"[{self.time}] {text}"


@dataclass
class SimulationResult:
    """Everything a caller or a renderer needs from one run.

    Attributes:
        taskset: The simulated task set, for labeling.
        policy: The policy that made dispatch decisions.
        start: First simulated instant.
        stop: Last instant that could be simulated.
        events: The ordered event log.
        feasible: False if any deadline was missed during the run.
    """
    taskset: TaskSet
    policy: SchedulingPolicy
    start: Rational
    stop: Rational
    events: List[SimulationEvent] = field(default_factory=list)
    feasible: bool = True

    @property
    def misses(self) -> List[SimulationEvent]:
        """Return all deadline-miss events."""
        return [e for e in self.events if e.kind is EventKind.DEADLINE_MISS]

    def events_between(self, start: RationalLike, stop: RationalLike) -> List[SimulationEvent]:
        """Return the events with ``start <= time < stop``."""
        start, stop = as_rational(start), as_rational(stop)
        return [e for e in self.events if start <= e.time < stop]

    def log_lines(self) -> List[str]:
        return [e.describe() for e in self.events]


def simulate(
    taskset: TaskSet,
    policy: Union[SchedulingPolicy, str] = "edf",
    start: Optional[RationalLike] = None,
    stop: Optional[RationalLike] = None,
) -> SimulationResult:
    """Simulate a task set under a scheduling policy.

    Runtime state is created fresh for every call, so the same TaskSet can be
    simulated repeatedly and yields identical logs.

    Args:
        taskset: The task set to simulate.
        policy: A SchedulingPolicy or its short name.
        start: First simulated instant. Defaults to the horizon start.
        stop: Last simulated instant (inclusive). Defaults to the horizon
            stop, ``max_start + 2 * hyperperiod``.

    Returns:
        The SimulationResult with the event log and overall feasibility.

    Raises:
        NonTerminatingIdle: If the processor is idle and every task sits on a
            deadline boundary, so no idle advance is positive (e.g. an empty
            task set).
    """
    if isinstance(policy, str):
        policy = get_policy(policy)
    if start is None or stop is None:
        horizon = compute_horizon(taskset)
        start = horizon.start if start is None else start
        stop = horizon.stop if stop is None else stop

    tasks = taskset.tasks
    states = taskset.new_states()
    result = SimulationResult(
        taskset=taskset,
        policy=policy,
        start=as_rational(start),
        stop=as_rational(stop),
    )

    def emit(kind: EventKind, task: Optional[int], time: Rational) -> None:
        event = SimulationEvent(kind, task, time)
        result.events.append(event)
        logger.debug(event.describe())

    time = result.start
    previous = None
    running = None
    while time <= result.stop:
        due = []
        for i, (task, state) in enumerate(zip(tasks, states)):
            deadline = state.deadline_instant(task)
            if deadline is None:
                continue
            if deadline == time or (previous is not None and previous < deadline < time):
                due.append((deadline, i))
        for deadline, i in sorted(due):
            overran = i == running and deadline < time
            if states[i].released or overran:
                result.feasible = False
                emit(EventKind.DEADLINE_MISS, i + 1, deadline)
            else:
                emit(EventKind.DEADLINE_HIT, i + 1, deadline)

        for i, (task, state) in enumerate(zip(tasks, states)):
            if task.is_release_instant(time):
                state.release(time)
                emit(EventKind.RELEASE, i + 1, time)

        previous = time
        running = policy.select(tasks, states, time)
        if running is not None:
            emit(EventKind.DISPATCH, running + 1, time)
            states[running].dispatch()
            time += tasks[running].execution
            continue

        emit(EventKind.IDLE, None, time)
        jump = idle_jump(tasks, time)
        if jump is None:
            raise NonTerminatingIdle(
                f"Processor idle at {time} and every task is on a deadline boundary"
            )
        time += jump

    logger.info(
        "%s simulation of %d tasks over [%s, %s]: %d events, %s",
        policy.label, len(tasks), result.start, result.stop, len(result.events),
        "feasible" if result.feasible else "infeasible",
    )
    return result


def idle_jump(tasks: Sequence[PeriodicTask], time: Rational) -> Optional[Rational]:
    """Return how far an idle processor advances from ``time``.

    The advance is the smallest strictly positive ``(time - start) mod
    deadline`` over all tasks. Returns None when every such value is zero or
    at least ``IDLE_JUMP_SENTINEL``, including for an empty task list.
    """
    best = IDLE_JUMP_SENTINEL
    for task in tasks:
        candidate = (time - task.start) % task.deadline
        if ZERO < candidate < best:
            best = candidate
    if best == IDLE_JUMP_SENTINEL:
        return None
    return best
