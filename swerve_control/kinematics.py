"""Swerve drive kinematic model.

This module provides forward and inverse kinematics for a four-module swerve
drivetrain, converting a body-frame chassis velocity into individual module
speeds and steering angles, and recovering the chassis velocity from a set
of measured module states.
"""

import math
from typing import Sequence

import numpy as np

from .geometry import MODULE_COUNT, ChassisVelocity, ModuleGeometry, ModuleStates, WheelState


class SwerveKinematics:
    """Kinematic model for a swerve drivetrain with a fixed module layout.

    For a module mounted at (x_i, y_i) on a rigid body moving with
    (vx, vy, omega), the module's velocity is:
        v_ix = vx - omega * y_i
        v_iy = vy + omega * x_i

    Stacking the four modules gives an 8×3 matrix M such that
    [v_0x, v_0y, ..., v_3x, v_3y]^T = M @ [vx, vy, omega]^T. The inverse
    direction uses the Moore-Penrose pseudo-inverse of M, the least-squares
    chassis velocity that best explains the four module vectors.

    Attributes:
        geometry: Module offsets in FL, FR, BL, BR order
    """

    def __init__(self, geometry: ModuleGeometry):
        """Initialize the kinematic model.

        Args:
            geometry: Module offsets. Fixed for the lifetime of this object.
        """
        self.geometry = geometry

        # Inverse kinematics matrix (8×3)
        rows = []
        for x, y in geometry.offsets:
            rows.append([1.0, 0.0, -y])
            rows.append([0.0, 1.0, x])
        self._inverse_kinematics = np.array(rows)

        # Forward kinematics matrix (3×8)
        self._forward_kinematics = np.linalg.pinv(self._inverse_kinematics)

    def to_wheel_states(self, velocity: ChassisVelocity) -> ModuleStates:
        """Compute module states from a chassis velocity.

        Args:
            velocity: Body-frame chassis velocity

        Returns:
            Four WheelStates in module order. A zero command yields zero
            speed with angle atan2(0, 0) = 0 for every module.

        Example:
            >>> kinematics = SwerveKinematics(ModuleGeometry.from_dimensions(0.5, 0.6))
            >>> states = kinematics.to_wheel_states(ChassisVelocity(1.0, 0.0, 0.0))
            >>> # All four modules point forward at 1 m/s
        """
        chassis = np.array([velocity.vx, velocity.vy, velocity.omega])
        module_vectors = self._inverse_kinematics @ chassis

        states = []
        for i in range(MODULE_COUNT):
            v_x = float(module_vectors[2 * i])
            v_y = float(module_vectors[2 * i + 1])
            states.append(WheelState(math.hypot(v_x, v_y), math.atan2(v_y, v_x)))

        return tuple(states)

    def to_chassis_velocity(self, states: Sequence[WheelState]) -> ChassisVelocity:
        """Recover the chassis velocity from module states (least squares).

        Args:
            states: Four WheelStates in module order

        Returns:
            Body-frame chassis velocity

        Raises:
            ValueError: If the number of states does not match the module count
        """
        if len(states) != MODULE_COUNT:
            raise ValueError(f"Expected {MODULE_COUNT} module states, got {len(states)}")

        module_vectors = np.zeros(2 * MODULE_COUNT)
        for i, state in enumerate(states):
            module_vectors[2 * i], module_vectors[2 * i + 1] = state.velocity()

        vx, vy, omega = self._forward_kinematics @ module_vectors
        return ChassisVelocity(float(vx), float(vy), float(omega))
