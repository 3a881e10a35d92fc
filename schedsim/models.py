"""Data models for periodic tasks, task sets and per-run task state."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union

from schedsim.rational import ZERO, Rational, RationalLike, as_rational


@dataclass(frozen=True)
class PeriodicTask:
    """A periodic task with a release offset.

    Attributes:
        start: Release offset of the first instance (s).
        deadline: Relative deadline of each instance (D).
        period: Time between consecutive releases (T).
        execution: Worst-case execution time (C).
        name: Optional label. Task sets fall back to ``J<number>``.

    All four time fields accept anything ``as_rational`` does and are stored
    as ``Rational``. ``execution`` may exceed ``deadline``; such a task is
    valid input and simply misses its deadlines when simulated.
    """
    start: RationalLike
    deadline: RationalLike
    period: RationalLike
    execution: RationalLike
    name: str = ""

    def __post_init__(self) -> None:
        """Convert fields to Rational and validate task parameters."""
        for attr in ('start', 'deadline', 'period', 'execution'):
            object.__setattr__(self, attr, as_rational(getattr(self, attr)))

        if self.start < 0:
            raise ValueError(f"Task {self.name}: start cannot be negative, got {self.start}")
        if self.deadline <= 0:
            raise ValueError(f"Task {self.name}: deadline must be positive, got {self.deadline}")
        if self.period <= 0:
            raise ValueError(f"Task {self.name}: period must be positive, got {self.period}")
        if self.execution <= 0:
            raise ValueError(f"Task {self.name}: execution must be positive, got {self.execution}")

    @property
    def utilization(self) -> Rational:
        """Return the utilization of this task (C/T)."""
        return self.execution / self.period

    @property
    def density(self) -> Rational:
        """Return the density of this task (C/D)."""
        return self.execution / self.deadline

    def is_release_instant(self, time: Rational) -> bool:
        """Whether an instance of this task is released exactly at ``time``."""
        offset = time - self.start
        return offset >= 0 and offset % self.period == ZERO

    def __str__(self) -> str:
        name_str = f"{self.name}: " if self.name else ""
        return (f"Task({name_str}s={self.start}, D={self.deadline}, "
                f"T={self.period}, C={self.execution})")


@dataclass
class TaskState:
    """Mutable bookkeeping for one task during a single simulation run.

    Attributes:
        released: An instance has been released and not yet dispatched.
        last_release: Release instant of the current instance.
    """
    released: bool = False
    last_release: Optional[Rational] = None

    def release(self, time: Rational) -> None:
        self.released = True
        self.last_release = time

    def dispatch(self) -> None:
        self.released = False

    def deadline_instant(self, task: PeriodicTask) -> Optional[Rational]:
        """Absolute deadline of the current instance, if any was released."""
        if self.last_release is None:
            return None
        return self.last_release + task.deadline


TaskLike = Union[PeriodicTask, Mapping[str, Any], Sequence[RationalLike]]


@dataclass
class TaskSet:
    """An ordered collection of periodic tasks.

    Order is insertion order. Tasks are referred to by their 1-based number
    in simulation events and rendered tables.

    Attributes:
        tasks: Tasks in the set. Mappings with ``start``, ``deadline``,
            ``period`` and ``execution`` keys, or ``(start, deadline, period,
            execution)`` tuples, are converted to ``PeriodicTask``.
    """
    tasks: List[PeriodicTask] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tasks = [_to_task(item) for item in self.tasks]

    def label(self, number: int) -> str:
        """Return the display label of the task with the given 1-based number."""
        task = self.tasks[number - 1]
        return task.name if task.name else f"J{number}"

    def new_states(self) -> List[TaskState]:
        """Return fresh, index-aligned runtime state for a simulation run."""
        return [TaskState() for _ in self.tasks]

    @property
    def total_utilization(self) -> Rational:
        """Return the total utilization of all tasks (sum of C/T)."""
        return sum((t.utilization for t in self.tasks), ZERO)

    @property
    def total_density(self) -> Rational:
        """Return the total density of all tasks (sum of C/D)."""
        return sum((t.density for t in self.tasks), ZERO)

    @property
    def max_start(self) -> Rational:
        """Return the latest release offset in the set (zero when empty)."""
        return max((t.start for t in self.tasks), default=ZERO)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def __getitem__(self, index: int) -> PeriodicTask:
        return self.tasks[index]


def _to_task(item: TaskLike) -> PeriodicTask:
    if isinstance(item, PeriodicTask):
        return item
    if isinstance(item, Mapping):
        return PeriodicTask(**item)
    if isinstance(item, (list, tuple)):
        return PeriodicTask(*item)
    raise TypeError(f"Cannot build a task from {type(item).__name__}")
