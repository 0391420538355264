"""Heading sources for the swerve drivetrain.

Two interchangeable variants share one interface:
- PhysicalGyro reads a hardware yaw sensor
- SimulatedGyro is advanced by the drivetrain simulation model

Each keeps its own zero reference as an offset over its raw reading.
LockstepGyro groups them: heading comes from the single authoritative
member, while zero() and set_heading() reach every member so the variants
never drift apart.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .hardware import YawSensor


class GyroSource(ABC):
    """Heading sensor with a re-definable zero reference.

    heading() = raw reading + offset. zero() and set_heading() only move the
    offset; the raw reading is owned by the sensor (or the simulation).
    """

    def __init__(self) -> None:
        self._offset: float = 0.0

    @abstractmethod
    def raw_heading(self) -> float:
        """Return the unreferenced heading (rad)."""

    def heading(self) -> float:
        """Return the current heading (rad), counter-clockwise positive."""
        return self.raw_heading() + self._offset

    def zero(self) -> None:
        """Redefine the current orientation as heading zero."""
        self._offset = -self.raw_heading()

    def set_heading(self, heading: float) -> None:
        """Redefine the current orientation as the given heading (rad)."""
        self._offset = heading - self.raw_heading()


class PhysicalGyro(GyroSource):
    """Gyro backed by a hardware yaw sensor.

    When no sensor is attached (e.g. running in simulation) the raw
    reading is a constant 0.0, the value an unconnected IMU reports.
    """

    def __init__(self, sensor: Optional[YawSensor] = None) -> None:
        super().__init__()
        self.sensor = sensor
        if sensor is None:
            logging.debug("No yaw sensor attached; physical gyro reads a constant raw yaw")

    def raw_heading(self) -> float:
        if self.sensor is None:
            return 0.0
        return float(self.sensor.read_yaw())


class SimulatedGyro(GyroSource):
    """Gyro whose raw angle is integrated by the simulation model."""

    def __init__(self) -> None:
        super().__init__()
        self._raw: float = 0.0

    def raw_heading(self) -> float:
        return self._raw

    def advance(self, delta: float) -> None:
        """Rotate the simulated sensor by delta radians."""
        self._raw += delta


class LockstepGyro(GyroSource):
    """Composite heading source with one authoritative member.

    Attributes:
        authoritative: Gyro whose heading feeds odometry
        followers: Gyros kept zeroed and set together with the authoritative one
    """

    def __init__(self, authoritative: GyroSource, followers: Sequence[GyroSource] = ()) -> None:
        super().__init__()
        self.authoritative = authoritative
        self.followers = tuple(followers)

    @property
    def members(self):
        return (self.authoritative,) + self.followers

    def raw_heading(self) -> float:
        return self.authoritative.heading()

    def heading(self) -> float:
        return self.authoritative.heading()

    def zero(self) -> None:
        for gyro in self.members:
            gyro.zero()

    def set_heading(self, heading: float) -> None:
        for gyro in self.members:
            gyro.set_heading(heading)
