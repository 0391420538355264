"""
Unit tests for SwerveKinematics and the geometry value types

Tests cover:
1. Module layout from track width and wheelbase
2. Chassis velocity → module states
3. Module states → chassis velocity
4. Constant-curvature pose integration
"""

import math

import pytest

from swerve_control.geometry import (
    ChassisVelocity,
    ModuleGeometry,
    Pose,
    WheelState,
    normalize_angle,
    stationary_states,
)
from swerve_control.kinematics import SwerveKinematics


# ============================================================================
# Geometry
# ============================================================================


class TestModuleGeometry:
    def test_from_dimensions_layout(self, geometry):
        assert geometry.front_left == (0.25, 0.3)
        assert geometry.front_right == (0.25, -0.3)
        assert geometry.back_left == (-0.25, 0.3)
        assert geometry.back_right == (-0.25, -0.3)

    def test_offsets_in_module_order(self, geometry):
        assert geometry.offsets == (
            geometry.front_left,
            geometry.front_right,
            geometry.back_left,
            geometry.back_right,
        )

    def test_max_radius(self, geometry):
        assert geometry.max_radius() == pytest.approx(math.hypot(0.25, 0.3))


class TestPose:
    def test_exp_straight_line(self):
        pose = Pose(1.0, 2.0, math.pi / 2).exp(0.5, 0.0, 0.0)
        assert pose.x == pytest.approx(1.0)
        assert pose.y == pytest.approx(2.5)
        assert pose.heading == pytest.approx(math.pi / 2)

    def test_exp_quarter_circle(self):
        """Driving a quarter circle of radius 1 lands at (1, 1)."""
        pose = Pose().exp(math.pi / 2, 0.0, math.pi / 2)
        assert pose.x == pytest.approx(1.0)
        assert pose.y == pytest.approx(1.0)
        assert pose.heading == pytest.approx(math.pi / 2)

    def test_exp_tiny_rotation_matches_straight_line(self):
        pose = Pose().exp(1.0, 0.0, 1e-12)
        assert pose.x == pytest.approx(1.0)
        assert pose.y == pytest.approx(0.0, abs=1e-9)

    def test_from_degrees(self):
        assert Pose.from_degrees(1.0, 2.0, 90.0).heading == pytest.approx(math.pi / 2)

    def test_normalize_angle(self):
        assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert normalize_angle(-0.25) == pytest.approx(-0.25)


# ============================================================================
# Inverse Kinematics
# ============================================================================


class TestToWheelStates:
    def test_pure_translation(self, kinematics):
        states = kinematics.to_wheel_states(ChassisVelocity(1.0, 1.0, 0.0))
        assert len(states) == 4
        for state in states:
            assert state.speed == pytest.approx(math.sqrt(2.0))
            assert state.angle == pytest.approx(math.pi / 4)

    def test_zero_command(self, kinematics):
        states = kinematics.to_wheel_states(ChassisVelocity())
        assert states == stationary_states()

    def test_rotation_in_place(self, kinematics, geometry):
        omega = 2.0
        states = kinematics.to_wheel_states(ChassisVelocity(0.0, 0.0, omega))
        radius = geometry.max_radius()

        for state, (x, y) in zip(states, geometry.offsets):
            assert state.speed == pytest.approx(omega * radius)
            # Wheel velocity is perpendicular to the module's offset
            vx, vy = state.velocity()
            assert vx * x + vy * y == pytest.approx(0.0, abs=1e-12)

    def test_module_order_follows_geometry(self, kinematics):
        """With vx + ω the right-hand modules (y < 0) turn faster."""
        fl, fr, bl, br = kinematics.to_wheel_states(ChassisVelocity(1.0, 0.0, 1.0))
        assert fl.velocity() == pytest.approx((0.7, 0.25))
        assert fr.velocity() == pytest.approx((1.3, 0.25))
        assert bl.velocity() == pytest.approx((0.7, -0.25))
        assert br.velocity() == pytest.approx((1.3, -0.25))


# ============================================================================
# Forward Kinematics
# ============================================================================


class TestToChassisVelocity:
    @pytest.mark.parametrize(
        "velocity",
        [
            ChassisVelocity(1.0, 0.0, 0.0),
            ChassisVelocity(-0.5, 2.0, 0.0),
            ChassisVelocity(0.0, 0.0, -3.0),
            ChassisVelocity(1.2, -0.7, 0.9),
        ],
    )
    def test_recovers_commanded_velocity(self, kinematics, velocity):
        recovered = kinematics.to_chassis_velocity(kinematics.to_wheel_states(velocity))
        assert recovered.vx == pytest.approx(velocity.vx, abs=1e-9)
        assert recovered.vy == pytest.approx(velocity.vy, abs=1e-9)
        assert recovered.omega == pytest.approx(velocity.omega, abs=1e-9)

    def test_least_squares_for_inconsistent_states(self, kinematics):
        """Swapping FL and FR of a turning command yields a reduced rotation."""
        fl, fr, bl, br = kinematics.to_wheel_states(ChassisVelocity(1.0, 0.0, 1.0))
        recovered = kinematics.to_chassis_velocity((fr, fl, bl, br))
        assert recovered.vx == pytest.approx(1.0)
        assert recovered.vy == pytest.approx(0.0, abs=1e-12)
        assert recovered.omega == pytest.approx(0.25 / 0.61)

    def test_wrong_state_count_raises(self, kinematics):
        with pytest.raises(ValueError, match="Expected 4 module states"):
            kinematics.to_chassis_velocity([WheelState()] * 3)

    def test_geometry_is_kept(self, geometry):
        assert SwerveKinematics(geometry).geometry is geometry
