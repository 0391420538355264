"""Odometry module for swerve drivetrain pose estimation.

This module provides dead-reckoning pose estimation from the gyro heading and
the four module states:
- Module states give the body-frame chassis velocity (inverse kinematics)
- The chassis velocity over one control period gives the translation
- The gyro heading change gives the rotation
- The twist is integrated as constant-curvature motion

The estimator holds a single state (always tracking). A reset overwrites the
pose immediately and never passes through an intermediate state.
"""

from typing import Dict, Optional, Sequence

from .geometry import Pose, WheelState, normalize_angle
from .kinematics import SwerveKinematics


class SwerveOdometry:
    """Pose estimator integrating gyro heading and module states.

    The estimator keeps a heading offset so that the published pose heading
    can differ from the raw gyro heading: at reset the offset is chosen so
    that the pose heading equals the requested one. Each update then uses
    the change in (gyro heading + offset) as the rotation for that period.

    Attributes:
        kinematics: Kinematic model used to recover chassis velocity
        period: Duration of one control cycle (seconds)
    """

    def __init__(
        self,
        kinematics: SwerveKinematics,
        heading: float = 0.0,
        initial_pose: Optional[Pose] = None,
        period: float = 0.02,
    ):
        """Initialize the odometry estimator.

        Args:
            kinematics: Kinematic model for the drivetrain
            heading: Gyro heading (rad) at the moment initial_pose is valid
            initial_pose: Starting pose. Defaults to the origin facing +x.
            period: Control period (seconds) integrated by each update

        Raises:
            ValueError: If period is not positive
        """
        if period <= 0:
            raise ValueError(f"Odometry period must be positive, got {period}")

        self.kinematics = kinematics
        self.period = period

        # Diagnostics (for logging)
        self.update_count = 0
        self.last_displacement = (0.0, 0.0, 0.0)

        self.reset(initial_pose if initial_pose is not None else Pose(), heading)

    @property
    def pose(self) -> Pose:
        return self._pose

    def update(self, heading: float, states: Sequence[WheelState]) -> Pose:
        """Advance the pose estimate by one control period.

        Args:
            heading: Current gyro heading (rad)
            states: Four module states in module order

        Returns:
            The new pose, which replaces the previous one
        """
        angle = heading + self._heading_offset

        # Body-frame displacement over one period
        chassis = self.kinematics.to_chassis_velocity(states)
        dx = chassis.vx * self.period
        dy = chassis.vy * self.period
        dtheta = normalize_angle(angle - self._previous_angle)

        new_pose = self._pose.exp(dx, dy, dtheta)

        # Heading is taken from the gyro, not accumulated from twists
        self._pose = new_pose.with_heading(normalize_angle(angle))
        self._previous_angle = angle

        self.update_count += 1
        self.last_displacement = (dx, dy, dtheta)

        return self._pose

    def reset(self, pose: Pose, heading: Optional[float] = None) -> None:
        """Overwrite the pose estimate.

        Must be paired with setting the gyro to a heading consistent with
        pose, so the next update continues from the same reference.

        Args:
            pose: New pose, taken as is
            heading: Gyro heading (rad) at this moment. Defaults to
                pose.heading, i.e. the gyro has just been set to match.
        """
        if heading is None:
            heading = pose.heading

        self._pose = pose
        self._heading_offset = pose.heading - heading
        self._previous_angle = pose.heading
        self.last_displacement = (0.0, 0.0, 0.0)

    def get_diagnostics(self) -> Dict[str, float]:
        """Get odometry diagnostic information.

        Returns:
            Dictionary containing:
                - x, y, heading: Current pose
                - dx, dy, dtheta: Last integrated body-frame twist
                - heading_offset: Offset between gyro and pose heading (rad)
                - updates: Number of updates since construction
        """
        dx, dy, dtheta = self.last_displacement
        return {
            "x": self._pose.x,
            "y": self._pose.y,
            "heading": self._pose.heading,
            "dx": dx,
            "dy": dy,
            "dtheta": dtheta,
            "heading_offset": self._heading_offset,
            "updates": self.update_count,
        }
