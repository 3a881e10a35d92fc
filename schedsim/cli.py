"""Command-line front end: feasibility tests, simulation and timeline table.

Task sets are read from a YAML file::

    policy: edf
    thick_boxes: true
    justify: center-left
    tasks:
      - {start: 0, deadline: 3, period: 4, execution: 1/2}
      - {start: 2, deadline: 3, period: 4, execution: 1}

Numeric fields may be integers, decimals, ``"n/d"`` strings or floats.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml  # pip install pyyaml

from schedsim.analysis import check_feasibility, compute_horizon, format_sum
from schedsim.errors import SchedSimError
from schedsim.models import TaskSet
from schedsim.policies import POLICIES, get_policy
from schedsim.rational import as_rational
from schedsim.render import JUSTIFY, render_timeline
from schedsim.simulator import simulate

logger = logging.getLogger(__name__)


def load_config(path: Path) -> Dict[str, Any]:
    """Load a YAML task-set file.

    A bare list is taken as the task list. Returns a mapping that always
    holds a ``tasks`` key.

    Raises:
        ValueError: If the document has no task list.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if isinstance(raw, list):
        raw = {"tasks": raw}
    if not isinstance(raw, dict) or "tasks" not in raw:
        raise ValueError(f"{path}: expected a 'tasks' list")
    if not isinstance(raw["tasks"], list) or not all(isinstance(t, dict) for t in raw["tasks"]):
        raise ValueError(f"{path}: every task must be a mapping")
    return raw


def build_taskset(config: Dict[str, Any]) -> TaskSet:
    return TaskSet(tasks=list(config["tasks"]))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Feasibility tests and schedule simulation for periodic task sets.",
    )
    parser.add_argument("tasks", type=Path, help="YAML file describing the task set")
    parser.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        help="Scheduling policy (default: the file's 'policy', else edf)",
    )
    parser.add_argument("--thin", action="store_true", help="Draw the table with thin lines")
    parser.add_argument(
        "--justify",
        choices=sorted(JUSTIFY),
        help="Cell justification (default: the file's 'justify', else center-left)",
    )
    parser.add_argument("--start", help="First simulated instant (default: 0)")
    parser.add_argument("--stop", help="Last simulated instant (default: max start + 2 hyperperiods)")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Simulate even when the utilization tests are conclusive",
    )
    parser.add_argument("--no-table", action="store_true", help="Do not print the timeline table")
    parser.add_argument("--no-log", action="store_true", help="Do not print the event log")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    config = load_config(args.tasks)
    taskset = build_taskset(config)
    policy = get_policy(args.policy or config.get("policy", "edf"))
    justify_name = args.justify or config.get("justify", "center-left")
    if justify_name not in JUSTIFY:
        raise ValueError(f"Unknown justification '{justify_name}'")
    justify = JUSTIFY[justify_name]
    thick_boxes = not args.thin and config.get("thick_boxes", True)

    report = check_feasibility(taskset)
    print("Performing feasibility tests...\n")
    print(format_sum(report.utilization_terms, report.utilization))
    print("The given processes are infeasible.\n" if report.infeasible
          else "The first test was inconclusive.\n")
    print(format_sum(report.density_terms, report.density))
    print("The given processes are feasible." if report.feasible
          else "The second test was inconclusive.")

    if not report.needs_simulation and not args.force:
        return

    horizon = compute_horizon(taskset)
    start = horizon.start if args.start is None else as_rational(args.start)
    stop = horizon.stop if args.stop is None else as_rational(args.stop)
    logger.info("hyperperiod %s, transient boundary %s", horizon.hyperperiod, horizon.transient)

    print("\nCreating schedule...\n")
    result = simulate(taskset, policy, start, stop)
    print(f"The schedule is {'' if result.feasible else 'in'}feasible.")
    print(f"{policy.label} scheduling algorithm being used.")
    if not args.no_table:
        print("\nSchedule:")
        print(render_timeline(result, thick_boxes=thick_boxes, justify=justify))
    if not args.no_log:
        print("\nLog:")
        print("\n".join(result.log_lines()))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        run(args)
    except (SchedSimError, ValueError, TypeError, OSError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
