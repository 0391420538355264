"""Planar geometry and drivetrain value types.

This module defines the small immutable records that flow through the
swerve control pipeline:
- ChassisVelocity: commanded body-frame velocity (vx, vy, omega)
- WheelState: per-module wheel speed and steering angle
- Pose: field-frame position and heading
- ModuleGeometry: fixed offsets of the four modules from the robot center

Module quantities are always stored as 4-tuples in MODULE_NAMES order
(front-left, front-right, back-left, back-right). Kinematics, odometry,
simulation and actuator wiring all index by that order.
"""

import math
from dataclasses import dataclass
from typing import Tuple

MODULE_NAMES: Tuple[str, str, str, str] = ("FL", "FR", "BL", "BR")
"""Module order used by every 4-element module array."""

MODULE_COUNT = len(MODULE_NAMES)


def normalize_angle(angle: float) -> float:
    """Wrap an angle to [-π, π].

    Args:
        angle: Angle in radians

    Returns:
        Equivalent angle in [-π, π]
    """
    return math.atan2(math.sin(angle), math.cos(angle))


@dataclass(frozen=True)
class ChassisVelocity:
    """Body-frame velocity command.

    Attributes:
        vx: Forward velocity (m/s)
        vy: Leftward (strafe) velocity (m/s)
        omega: Angular velocity (rad/s), positive counter-clockwise
    """

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0

    def is_finite(self) -> bool:
        """Return True when every component is a finite number."""
        return all(math.isfinite(v) for v in (self.vx, self.vy, self.omega))


@dataclass(frozen=True)
class WheelState:
    """Speed and steering angle of one swerve module.

    Attributes:
        speed: Wheel surface speed (m/s), signed
        angle: Steering angle (rad) relative to the robot's forward axis
    """

    speed: float = 0.0
    angle: float = 0.0

    def scaled(self, factor: float) -> "WheelState":
        """Return a copy with the speed multiplied by factor."""
        return WheelState(self.speed * factor, self.angle)

    def velocity(self) -> Tuple[float, float]:
        """Return the module's velocity vector (vx, vy) in the robot frame."""
        return self.speed * math.cos(self.angle), self.speed * math.sin(self.angle)


ModuleStates = Tuple[WheelState, WheelState, WheelState, WheelState]
"""Four wheel states in MODULE_NAMES order."""


def stationary_states(angle: float = 0.0) -> ModuleStates:
    """Build four zero-speed wheel states sharing one steering angle."""
    state = WheelState(0.0, angle)
    return (state, state, state, state)


@dataclass(frozen=True)
class Pose:
    """Field-frame robot pose.

    Attributes:
        x: Position along field x (m)
        y: Position along field y (m)
        heading: Orientation (rad), positive counter-clockwise
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    @classmethod
    def from_degrees(cls, x: float, y: float, heading_deg: float) -> "Pose":
        return cls(x, y, math.radians(heading_deg))

    def exp(self, dx: float, dy: float, dtheta: float) -> "Pose":
        """Apply a body-frame twist as constant-curvature motion.

        The twist (dx, dy, dtheta) is the displacement accumulated over one
        step, expressed in the frame of this pose. The motion is integrated
        along an arc rather than a straight chord, so a robot driving and
        turning at constant rates ends up exactly on its circular path.

        Args:
            dx: Forward displacement (m)
            dy: Leftward displacement (m)
            dtheta: Heading change (rad)

        Returns:
            The pose reached after the twist
        """
        sin_theta = math.sin(dtheta)
        cos_theta = math.cos(dtheta)

        # Series expansion near zero avoids dividing by a vanishing angle
        if abs(dtheta) < 1e-9:
            s = 1.0 - dtheta**2 / 6.0
            c = 0.5 * dtheta
        else:
            s = sin_theta / dtheta
            c = (1.0 - cos_theta) / dtheta

        # Displacement in the pose frame
        local_x = dx * s - dy * c
        local_y = dx * c + dy * s

        # Rotate into the field frame
        cos_h = math.cos(self.heading)
        sin_h = math.sin(self.heading)
        return Pose(
            self.x + local_x * cos_h - local_y * sin_h,
            self.y + local_x * sin_h + local_y * cos_h,
            self.heading + dtheta,
        )

    def with_heading(self, heading: float) -> "Pose":
        return Pose(self.x, self.y, heading)

    def distance_to(self, other: "Pose") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return f"Pose(x={self.x:.3f}, y={self.y:.3f}, heading={math.degrees(self.heading):.1f}°)"


@dataclass(frozen=True)
class ModuleGeometry:
    """Offsets (x, y) of each module from the robot center, in MODULE_NAMES order.

    Attributes:
        front_left: (x, y) offset of the front-left module (m)
        front_right: (x, y) offset of the front-right module (m)
        back_left: (x, y) offset of the back-left module (m)
        back_right: (x, y) offset of the back-right module (m)
    """

    front_left: Tuple[float, float]
    front_right: Tuple[float, float]
    back_left: Tuple[float, float]
    back_right: Tuple[float, float]

    @classmethod
    def from_dimensions(cls, track_width: float, wheel_base: float) -> "ModuleGeometry":
        """Build a rectangular module layout.

        Half the track width is placed on x and half the wheelbase on y,
        which is how the drivetrain's hardware configuration defines them.

        Args:
            track_width: Track width (m)
            wheel_base: Wheelbase (m)

        Returns:
            ModuleGeometry in FL, FR, BL, BR order
        """
        half_x = track_width / 2.0
        half_y = wheel_base / 2.0
        return cls(
            front_left=(half_x, half_y),
            front_right=(half_x, -half_y),
            back_left=(-half_x, half_y),
            back_right=(-half_x, -half_y),
        )

    @property
    def offsets(self) -> Tuple[Tuple[float, float], ...]:
        return (self.front_left, self.front_right, self.back_left, self.back_right)

    def max_radius(self) -> float:
        """Largest distance from the robot center to a module (m)."""
        return max(math.hypot(x, y) for x, y in self.offsets)
