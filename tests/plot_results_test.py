"""
Unit tests for the recorded-run plotting script

Tests cover:
1. CSV loading (numeric columns, non-numeric cells, ragged rows)
2. Locating the most recent run directory
3. Rendering and saving the run summary figures
"""

import matplotlib

matplotlib.use("Agg")

import math

import pytest

from swerve_control.drivetrain import SwerveDrivetrain
from swerve_control.geometry import ChassisVelocity
from swerve_control.plot_results import find_latest_run, load_csv_columns, plot_run_summary
from swerve_control.telemetry import TelemetryRecorder


@pytest.fixture
def recorded_run(tmp_path):
    """Record ten simulated ticks into tmp_path and return the run directory."""
    drivetrain = SwerveDrivetrain(simulated=True)
    drivetrain.init()
    drivetrain.drive(ChassisVelocity(1.0, 0.0, 0.5))

    with TelemetryRecorder(run_dir=str(tmp_path)) as recorder:
        for tick in range(10):
            drivetrain.simulation_periodic()
            recorder.record(tick * 0.02, drivetrain)

    return tmp_path


# ============================================================================
# CSV Loading
# ============================================================================


class TestLoadCsvColumns:
    def test_recorded_pose_columns(self, recorded_run):
        pose = load_csv_columns(recorded_run / "pose_data.csv")

        assert len(pose["x"]) == 10
        assert pose["timestamp"][-1] == pytest.approx(0.18)
        assert pose["x"][-1] > 0.0

    def test_state_column_becomes_nan(self, recorded_run):
        pose = load_csv_columns(recorded_run / "pose_data.csv")
        assert all(math.isnan(v) for v in pose["state"])

    def test_ragged_rows_skipped(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("timestamp,x\n0.0,1.0\n0.02\n0.04,3.0,extra\n0.06,4.0\n")

        columns = load_csv_columns(path)

        assert list(columns["timestamp"]) == [0.0, 0.06]
        assert list(columns["x"]) == [1.0, 4.0]

    def test_missing_csv(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="CSV file not found"):
            load_csv_columns(tmp_path / "pose_data.csv")


# ============================================================================
# Run Discovery
# ============================================================================


class TestFindLatestRun:
    def test_picks_latest(self, tmp_path):
        (tmp_path / "run_20250101_000000").mkdir()
        (tmp_path / "run_20250102_000000").mkdir()
        (tmp_path / "notes").mkdir()
        (tmp_path / "run_20250103_000000.txt").write_text("")

        assert find_latest_run(tmp_path).name == "run_20250102_000000"

    def test_missing_results_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Results directory not found"):
            find_latest_run(tmp_path / "results")

    def test_no_run_dirs(self, tmp_path):
        (tmp_path / "notes").mkdir()
        with pytest.raises(FileNotFoundError, match="No run directories"):
            find_latest_run(tmp_path)


# ============================================================================
# Figures
# ============================================================================


class TestPlotRunSummary:
    def test_saves_figures(self, recorded_run):
        plot_run_summary(recorded_run, save_plots=True, show_plots=False)

        assert (recorded_run / "trajectory.png").stat().st_size > 0
        assert (recorded_run / "modules.png").stat().st_size > 0

    def test_without_simulation_data(self, recorded_run):
        (recorded_run / "simulation_data.csv").unlink()
        plot_run_summary(recorded_run, save_plots=True, show_plots=False)
        assert (recorded_run / "trajectory.png").exists()

    def test_no_save(self, recorded_run):
        plot_run_summary(recorded_run, save_plots=False, show_plots=False)
        assert not (recorded_run / "trajectory.png").exists()

    def test_missing_module_data(self, recorded_run):
        (recorded_run / "module_data.csv").unlink()
        with pytest.raises(FileNotFoundError):
            plot_run_summary(recorded_run, save_plots=False, show_plots=False)
