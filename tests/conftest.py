"""Shared fixtures and hardware fakes for the swerve_control tests."""

from types import SimpleNamespace

import pytest

from swerve_control import config
from swerve_control.geometry import ModuleGeometry
from swerve_control.kinematics import SwerveKinematics


# ============================================================================
# Hardware Fakes
# ============================================================================


class FakeActuator:
    """Module actuator that records every command it receives."""

    def __init__(self, name):
        self.name = name
        self.commands = []

    def set(self, drive_voltage, steer_angle):
        self.commands.append((drive_voltage, steer_angle))

    @property
    def last(self):
        return self.commands[-1] if self.commands else None


class FakeYawSensor:
    """Yaw sensor whose raw reading is set by the test."""

    def __init__(self, yaw=0.0):
        self.yaw = yaw

    def read_yaw(self):
        return self.yaw


class FakeActuatorFactory:
    """Actuator factory that keeps the actuators it builds, by module name."""

    def __init__(self):
        self.actuators = {}
        self.calls = []

    def __call__(self, name, hardware, module_configuration):
        self.calls.append((name, hardware, module_configuration))
        actuator = FakeActuator(name)
        self.actuators[name] = actuator
        return actuator


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def make_config():
    """Build a configuration record from swerve_control.config with overrides."""

    def _make(**overrides):
        values = {name: getattr(config, name) for name in dir(config) if name.isupper()}
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make


@pytest.fixture
def geometry():
    return ModuleGeometry.from_dimensions(0.5, 0.6)


@pytest.fixture
def kinematics(geometry):
    return SwerveKinematics(geometry)


@pytest.fixture
def actuator_factory():
    return FakeActuatorFactory()


@pytest.fixture
def yaw_sensor():
    return FakeYawSensor()
