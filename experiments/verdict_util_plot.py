"""Feasibility Verdict vs Utilisation Experiment.

Generates random task sets at various utilisation levels using UUniFast,
applies the two utilisation tests to each, simulates the undetermined ones
under EDF, and plots the share of each outcome as a function of utilisation.
"""

from pathlib import Path

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from schedsim.analysis import check_feasibility
from schedsim.errors import NonTerminatingIdle
from schedsim.generators import generate_taskset
from schedsim.simulator import simulate

# Periods with a small common multiple keep every simulation short.
PERIOD_MENU = (2, 3, 4, 6, 8, 12)
OUTCOMES = ("infeasible", "feasible", "undetermined", "simulated_ok", "stalled")


def run_verdict_experiment(
    utilisation_points: list,
    num_task_sets_per_point: int = 100,
    num_tasks: int = 4,
    deadline_factor_min: float = 0.5,
    deadline_factor_max: float = 1.0,
    seed: int = 42,
) -> dict:
    """Run the verdict experiment across utilisation levels.

    Args:
        utilisation_points: List of utilisation values to test.
        num_task_sets_per_point: Number of random task sets per utilisation.
        num_tasks: Number of tasks per task set.
        deadline_factor_min: Minimum D/T ratio of generated tasks.
        deadline_factor_max: Maximum D/T ratio of generated tasks.
        seed: Base random seed (varied per task set).

    Returns:
        Dictionary mapping utilisation -> {outcome: ratio}. ``simulated_ok``
        is the share of all task sets that were undetermined analytically
        and then simulated without a deadline miss. ``stalled`` counts the
        undetermined ones whose simulation idled with every task on a
        deadline boundary.
    """
    results = {}

    for u_total in utilisation_points:
        counts = dict.fromkeys(OUTCOMES, 0)

        for i in range(num_task_sets_per_point):
            taskset = generate_taskset(
                n=num_tasks,
                target_utilization=u_total,
                periods=PERIOD_MENU,
                deadline_factor_min=deadline_factor_min,
                deadline_factor_max=deadline_factor_max,
                seed=seed + int(u_total * 1000) + i,
            )

            report = check_feasibility(taskset)
            counts[report.verdict] += 1
            if not report.needs_simulation:
                continue
            try:
                if simulate(taskset, "edf").feasible:
                    counts["simulated_ok"] += 1
            except NonTerminatingIdle:
                counts["stalled"] += 1

        results[u_total] = {
            outcome: count / num_task_sets_per_point for outcome, count in counts.items()
        }

    return results


def plot_verdicts_vs_utilisation(
    results: dict,
    output_path: str = "results/verdicts_vs_utilisation.png",
) -> None:
    """Plot the share of each verdict against utilisation.

    Args:
        results: Output of ``run_verdict_experiment``.
        output_path: Path to save the plot.
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib is required for plotting")

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    utilisations = sorted(results.keys())
    plt.figure(figsize=(10, 6))
    for outcome, style in zip(OUTCOMES, ('rs-', 'go-', 'b^-', 'k--', 'm:')):
        plt.plot(utilisations, [results[u][outcome] for u in utilisations],
                 style, linewidth=2, markersize=8, label=outcome.replace('_', ' '))
    plt.xlabel('Total Utilisation', fontsize=12)
    plt.ylabel('Share of Task Sets', fontsize=12)
    plt.title('Feasibility Verdicts vs Utilisation', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.ylim(0, 1.05)
    plt.legend()

    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"Plot saved to {output_path}")


def main():
    """Run the full verdict vs utilisation experiment."""
    print("Running verdict vs utilisation experiment...")

    utilisation_points = [u / 10.0 for u in range(1, 13)]  # 0.1 ... 1.2
    results = run_verdict_experiment(utilisation_points, num_task_sets_per_point=100)

    print("\nResults:")
    for u, shares in sorted(results.items()):
        summary = ", ".join(f"{k}={v:.2f}" for k, v in shares.items())
        print(f"  U = {u:.1f}: {summary}")

    plot_verdicts_vs_utilisation(results)

    print("\nExperiment complete!")


if __name__ == "__main__":
    main()
