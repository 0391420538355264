"""
Unit tests for TelemetryRecorder
"""

import csv

import pytest

from swerve_control.drivetrain import SwerveDrivetrain
from swerve_control.geometry import ChassisVelocity
from swerve_control.telemetry import MODULE_HEADERS, POSE_HEADERS, SIMULATION_HEADERS, TelemetryRecorder


@pytest.fixture
def sim_drivetrain():
    drivetrain = SwerveDrivetrain(simulated=True)
    drivetrain.init()
    return drivetrain


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


def record_run(recorder, drivetrain, ticks):
    drivetrain.drive(ChassisVelocity(1.0, 0.0, 0.5))
    for tick in range(ticks):
        drivetrain.simulation_periodic()
        recorder.record(tick * 0.02, drivetrain)


# ============================================================================
# Recorder
# ============================================================================


class TestTelemetryRecorder:
    def test_run_dir_argument(self, tmp_path):
        recorder = TelemetryRecorder(run_dir=str(tmp_path / "run_a"))
        assert recorder.run_dir == tmp_path / "run_a"
        assert recorder.run_dir.is_dir()

    def test_run_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RUN_DIR", str(tmp_path / "env_run"))
        assert TelemetryRecorder().run_dir == tmp_path / "env_run"

    def test_timestamped_run_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RUN_DIR", raising=False)
        recorder = TelemetryRecorder(output_dir=str(tmp_path))
        assert recorder.run_dir.parent == tmp_path / "results"
        assert recorder.run_dir.name.startswith("run_")

    def test_output_dir_is_file(self, tmp_path):
        path = tmp_path / "not_a_dir"
        path.write_text("")
        with pytest.raises(ValueError, match="not a directory"):
            TelemetryRecorder(output_dir=str(path))

    def test_records_every_tick(self, tmp_path, sim_drivetrain):
        with TelemetryRecorder(run_dir=str(tmp_path)) as recorder:
            record_run(recorder, sim_drivetrain, 5)

        pose_rows = read_rows(recorder.pose_output_path)
        module_rows = read_rows(recorder.module_output_path)
        simulation_rows = read_rows(recorder.simulation_output_path)

        assert pose_rows[0] == POSE_HEADERS
        assert module_rows[0] == MODULE_HEADERS
        assert simulation_rows[0] == SIMULATION_HEADERS
        assert len(pose_rows) == len(module_rows) == len(simulation_rows) == 6
        assert pose_rows[-1][-1] == "running"

    def test_module_voltage_column(self, tmp_path, sim_drivetrain):
        with TelemetryRecorder(run_dir=str(tmp_path)) as recorder:
            record_run(recorder, sim_drivetrain, 1)

        row = dict(zip(MODULE_HEADERS, read_rows(recorder.module_output_path)[1]))
        speed = float(row["FL_speed"])
        assert float(row["FL_voltage"]) == pytest.approx(sim_drivetrain.drive_voltage(speed))

