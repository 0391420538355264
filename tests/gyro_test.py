"""
Unit tests for the heading sources

Tests cover:
1. Offset handling shared by every GyroSource
2. PhysicalGyro with and without a yaw sensor
3. SimulatedGyro integration
4. LockstepGyro authority and lockstep resets
"""

import math

import pytest

from swerve_control.gyro import LockstepGyro, PhysicalGyro, SimulatedGyro


# ============================================================================
# Individual Sources
# ============================================================================


class TestPhysicalGyro:
    def test_reads_sensor(self, yaw_sensor):
        yaw_sensor.yaw = 0.4
        assert PhysicalGyro(yaw_sensor).heading() == pytest.approx(0.4)

    def test_without_sensor_reads_zero(self):
        assert PhysicalGyro().heading() == 0.0

    def test_zero_then_rotate(self, yaw_sensor):
        gyro = PhysicalGyro(yaw_sensor)
        yaw_sensor.yaw = 1.0
        gyro.zero()
        assert gyro.heading() == pytest.approx(0.0)

        yaw_sensor.yaw = 1.5
        assert gyro.heading() == pytest.approx(0.5)

    def test_set_heading(self, yaw_sensor):
        gyro = PhysicalGyro(yaw_sensor)
        yaw_sensor.yaw = -0.3
        gyro.set_heading(math.pi / 2)
        assert gyro.heading() == pytest.approx(math.pi / 2)


class TestSimulatedGyro:
    def test_advance_accumulates(self):
        gyro = SimulatedGyro()
        gyro.advance(0.1)
        gyro.advance(0.2)
        assert gyro.heading() == pytest.approx(0.3)

    def test_set_heading_keeps_raw(self):
        gyro = SimulatedGyro()
        gyro.advance(1.0)
        gyro.set_heading(0.25)
        assert gyro.raw_heading() == pytest.approx(1.0)
        assert gyro.heading() == pytest.approx(0.25)


# ============================================================================
# Lockstep
# ============================================================================


class TestLockstepGyro:
    def test_heading_from_authoritative_only(self, yaw_sensor):
        simulated = SimulatedGyro()
        physical = PhysicalGyro(yaw_sensor)
        gyro = LockstepGyro(simulated, [physical])

        simulated.advance(0.7)
        yaw_sensor.yaw = -2.0
        assert gyro.heading() == pytest.approx(0.7)

    def test_zero_reaches_every_member(self, yaw_sensor):
        simulated = SimulatedGyro()
        physical = PhysicalGyro(yaw_sensor)
        gyro = LockstepGyro(simulated, [physical])

        simulated.advance(1.2)
        yaw_sensor.yaw = 0.4
        gyro.zero()

        assert simulated.heading() == pytest.approx(0.0)
        assert physical.heading() == pytest.approx(0.0)
        assert gyro.heading() == pytest.approx(0.0)

    def test_set_heading_reaches_every_member(self):
        simulated = SimulatedGyro()
        physical = PhysicalGyro()
        gyro = LockstepGyro(simulated, [physical])

        gyro.set_heading(math.pi / 2)

        assert simulated.heading() == pytest.approx(math.pi / 2)
        assert physical.heading() == pytest.approx(math.pi / 2)

    def test_members(self):
        simulated = SimulatedGyro()
        physical = PhysicalGyro()
        assert LockstepGyro(simulated, [physical]).members == (simulated, physical)
        assert LockstepGyro(physical).members == (physical,)
