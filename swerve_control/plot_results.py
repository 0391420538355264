#!/usr/bin/env python3
"""
Standalone script to visualize recorded swerve drivetrain runs.

This script loads the pose, module and simulation CSV files written by
TelemetryRecorder from a run directory and plots the odometry trajectory
against the simulated ground truth, plus each module's drive voltage and
steering angle over time.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .config import MODULE_COLORS, PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE, TERM_BLUE, TERM_RESET
from .geometry import MODULE_NAMES


def load_csv_columns(filepath: Path) -> Dict[str, np.ndarray]:
    """Load a numeric CSV file into one numpy array per column.

    Non-numeric cells (e.g. the lifecycle state column) become NaN.

    Args:
        filepath: Path to the CSV file.

    Returns:
        Dictionary mapping column header to a float array.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    with open(filepath, newline="") as f:
        reader = csv.reader(f)
        headers = next(reader)
        rows = list(reader)

    columns: Dict[str, list] = {header: [] for header in headers}
    for row in rows:
        if len(row) != len(headers):
            continue
        for header, cell in zip(headers, row):
            try:
                columns[header].append(float(cell))
            except ValueError:
                columns[header].append(np.nan)

    return {header: np.array(values) for header, values in columns.items()}


def plot_trajectory(pose: Dict[str, np.ndarray], simulation: Optional[Dict[str, np.ndarray]]) -> Figure:
    """Plot the odometry trajectory, with simulated ground truth when available."""
    fig, ax = plt.subplots(figsize=(7, 7))

    if simulation is not None and len(simulation["x"]) > 0:
        ax.plot(simulation["x"], simulation["y"], color=PLOT_BLUE, linewidth=2, label="Simulated")
    ax.plot(pose["x"], pose["y"], color=PLOT_ORANGE, linewidth=1.5, linestyle="--", label="Odometry")

    if len(pose["x"]) > 0:
        ax.plot(pose["x"][0], pose["y"][0], "o", color=PLOT_TAUPE, label="Start")

    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    ax.set_title("Drivetrain Trajectory")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    return fig


def plot_modules(modules: Dict[str, np.ndarray]) -> Figure:
    """Plot drive voltage and steering angle of each module over time."""
    fig, (ax_voltage, ax_angle) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)
    t = modules["timestamp"]

    for name, color in zip(MODULE_NAMES, MODULE_COLORS):
        ax_voltage.plot(t, modules[f"{name}_voltage"], color=color, label=name)
        ax_angle.plot(t, np.degrees(modules[f"{name}_angle"]), color=color, label=name)

    ax_voltage.set_ylabel("Drive voltage (V)")
    ax_voltage.set_title("Module Commands")
    ax_voltage.grid(True, alpha=0.3)
    ax_voltage.legend(loc="upper right")

    ax_angle.set_xlabel("Time (s)")
    ax_angle.set_ylabel("Steer angle (deg)")
    ax_angle.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> None:
    """Generate all plots for a recorded run.

    Args:
        run_dir: Run directory containing pose_data.csv and module_data.csv.
        save_plots: Save the figures as PNG files in run_dir.
        show_plots: Display the figures interactively.

    Raises:
        FileNotFoundError: If a required CSV file is missing.
    """
    pose = load_csv_columns(run_dir / "pose_data.csv")
    modules = load_csv_columns(run_dir / "module_data.csv")

    simulation_path = run_dir / "simulation_data.csv"
    simulation = load_csv_columns(simulation_path) if simulation_path.exists() else None

    figures = {
        "trajectory.png": plot_trajectory(pose, simulation),
        "modules.png": plot_modules(modules),
    }

    if save_plots:
        for filename, fig in figures.items():
            fig.savefig(run_dir / filename, dpi=150)

    if show_plots:
        plt.show()
    else:
        for fig in figures.values():
            plt.close(fig)


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Args:
        results_dir: Path to the results directory.

    Returns:
        Path to the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def main() -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize recorded swerve drivetrain runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m swerve_control.plot_results

  # Plot a specific run and save the figures without displaying them
  python -m swerve_control.plot_results --run run_20251114_184704 --save --no-show
        """,
    )
    parser.add_argument(
        "--run",
        type=str,
        default=None,
        help="Name of the run directory to plot. If not specified, plots the most recent run.",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Path to the results directory (default: results)",
    )
    parser.add_argument(
        "--save", action="store_true", help="Save plots as PNG files in the run directory"
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    args = parser.parse_args()

    results_dir = Path(args.results_dir)

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            sys.exit(1)
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
        if args.save:
            logging.info(f"{TERM_BLUE}✓ Saved plots to {run_dir}/{TERM_RESET}")
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains pose_data.csv and module_data.csv")
        sys.exit(1)


if __name__ == "__main__":
    main()
