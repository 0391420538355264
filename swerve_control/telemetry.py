"""Run recording for swerve drivetrain telemetry.

This module provides CSV logging for:
- Published pose and gyro headings
- Actuated module states (speed, angle, drive voltage)
- Simulation ground truth (simulated context only)

The recorder only reads the drivetrain's accessors. Nothing it writes is ever
read back by the control core.
"""

import csv
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET
from .geometry import MODULE_NAMES

POSE_HEADERS = ["timestamp", "x", "y", "heading", "gyro_heading", "state"]
MODULE_HEADERS = ["timestamp"] + [
    f"{name}_{field}" for name in MODULE_NAMES for field in ("speed", "angle", "voltage")
]
SIMULATION_HEADERS = ["timestamp", "x", "y", "heading", "vx", "vy", "omega"]


class TelemetryRecorder:
    """Manages CSV file creation and logging for drivetrain telemetry.

    Attributes:
        run_dir: Directory path for this run's output files.
        pose_output_path: Path of the pose CSV.
        module_output_path: Path of the module state CSV.
        simulation_output_path: Path of the simulation ground-truth CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the recorder.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates a timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir exists and is not a directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.module_csv_file: Optional[TextIO] = None
        self.module_csv_writer: Any = None
        self.simulation_csv_file: Optional[TextIO] = None
        self.simulation_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / RESULTS_DIR / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.module_output_path: Path = self.run_dir / "module_data.csv"
        self.simulation_output_path: Path = self.run_dir / "simulation_data.csv"

    def setup(self) -> None:
        """Open all CSV files and write their headers."""
        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(POSE_HEADERS)
        self.pose_csv_file.flush()

        self.module_csv_file = open(self.module_output_path, "w", newline="")
        self.module_csv_writer = csv.writer(self.module_csv_file)
        self.module_csv_writer.writerow(MODULE_HEADERS)
        self.module_csv_file.flush()

        self.simulation_csv_file = open(self.simulation_output_path, "w", newline="")
        self.simulation_csv_writer = csv.writer(self.simulation_csv_file)
        self.simulation_csv_writer.writerow(SIMULATION_HEADERS)
        self.simulation_csv_file.flush()

    def record(self, timestamp: float, drivetrain: Any) -> None:
        """Record one tick of drivetrain telemetry.

        Args:
            timestamp: Time since the start of the run (seconds).
            drivetrain: An initialized SwerveDrivetrain.
        """
        pose = drivetrain.pose
        self.pose_csv_writer.writerow(
            [timestamp, pose.x, pose.y, pose.heading, drivetrain.heading, drivetrain.state.value]
        )
        if self.pose_csv_file:
            self.pose_csv_file.flush()

        row = [timestamp]
        for state in drivetrain.module_states:
            row.extend([state.speed, state.angle, drivetrain.drive_voltage(state.speed)])
        self.module_csv_writer.writerow(row)
        if self.module_csv_file:
            self.module_csv_file.flush()

        if drivetrain.simulation is not None:
            sim = drivetrain.simulation.get_diagnostics()
            self.simulation_csv_writer.writerow(
                [
                    timestamp,
                    sim["x"],
                    sim["y"],
                    sim["heading"],
                    sim["vx"],
                    sim["vy"],
                    sim["omega"],
                ]
            )
            if self.simulation_csv_file:
                self.simulation_csv_file.flush()

    def cleanup(self) -> None:
        """Close all CSV files and log the output location."""
        for handle in (self.pose_csv_file, self.module_csv_file, self.simulation_csv_file):
            if handle:
                handle.close()

        print(f"{TERM_BLUE}✓ Saved telemetry to {self.run_dir}/{TERM_RESET}")

    def __enter__(self) -> "TelemetryRecorder":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
