"""Physics surrogate for running the drivetrain without hardware.

The simulation model stands in for the four modules and the gyro when the
drivetrain runs in a simulated execution context:
- SimulatedSwerveModule accepts the same (voltage, angle) commands as a real
  module and turns them into a wheel state
- SwerveDrivetrainModel steps those modules, recovers the chassis motion
  through the kinematic model and integrates a ground-truth pose and the
  simulated gyro

Only kinematics are modelled: wheel speed follows commanded voltage
instantly and there is no slip.
"""

import logging
from typing import Dict, Optional

from .geometry import (
    MODULE_NAMES,
    ChassisVelocity,
    ModuleStates,
    Pose,
    WheelState,
)
from .gyro import SimulatedGyro
from .hardware import ModuleConfiguration
from .kinematics import SwerveKinematics


class SimulatedSwerveModule:
    """Simulated module actuator.

    Attributes:
        name: Module name (FL, FR, BL or BR)
        drive_voltage: Last commanded drive voltage (V)
        steer_angle: Last commanded steer angle (rad)
        speed: Simulated wheel speed (m/s), updated by the model each step
    """

    def __init__(self, name: str):
        self.name = name
        self.drive_voltage: float = 0.0
        self.steer_angle: float = 0.0
        self.speed: float = 0.0

    def set(self, drive_voltage: float, steer_angle: float) -> None:
        self.drive_voltage = drive_voltage
        self.steer_angle = steer_angle

    @property
    def state(self) -> WheelState:
        return WheelState(self.speed, self.steer_angle)


class SwerveDrivetrainModel:
    """Kinematic simulation of a swerve drivetrain.

    Attributes:
        kinematics: Kinematic model shared with the controller
        gyro: Simulated gyro advanced by each step
        modules: Simulated module actuators in module order
        pose: Ground-truth simulated pose
        max_linear_velocity: Wheel speed reached at full supply voltage (m/s)
        period: Duration of one step (seconds)
    """

    def __init__(
        self,
        kinematics: SwerveKinematics,
        gyro: SimulatedGyro,
        max_linear_velocity: float,
        period: float = 0.02,
        module_configuration: Optional[ModuleConfiguration] = None,
        initial_pose: Optional[Pose] = None,
    ):
        """Initialize the simulation model.

        Args:
            kinematics: Kinematic model for the drivetrain
            gyro: Simulated gyro to advance alongside the pose
            max_linear_velocity: Wheel speed at full supply voltage (m/s)
            period: Step duration (seconds)
            module_configuration: Module electrical settings. The nominal
                voltage bounds the voltage a simulated motor accepts.
            initial_pose: Starting ground-truth pose (default: origin)
        """
        self.kinematics = kinematics
        self.gyro = gyro
        self.max_linear_velocity = max_linear_velocity
        self.period = period
        self.module_configuration = module_configuration or ModuleConfiguration()

        self.modules = tuple(SimulatedSwerveModule(name) for name in MODULE_NAMES)
        self.pose = initial_pose if initial_pose is not None else Pose()

        self.last_chassis_velocity = ChassisVelocity()
        self.step_count = 0

    def compute_module_states(self, velocity: ChassisVelocity) -> ModuleStates:
        """Compute the module states the modules should be commanded to.

        Args:
            velocity: Body-frame chassis velocity command

        Returns:
            Four WheelStates in module order
        """
        return self.kinematics.to_wheel_states(velocity)

    def module_states(self) -> ModuleStates:
        """Return the simulated (measured) state of each module."""
        return tuple(module.state for module in self.modules)

    def step(self, disabled: bool, supply_voltage: float) -> Pose:
        """Advance the simulation by one period.

        Args:
            disabled: If True, motors are unpowered: wheels stop and the
                pose and gyro do not move
            supply_voltage: Voltage available to the motors (V)

        Returns:
            The simulated pose after the step
        """
        self.step_count += 1

        if disabled or supply_voltage <= 0:
            for module in self.modules:
                module.speed = 0.0
            self.last_chassis_velocity = ChassisVelocity()
            return self.pose

        # Voltage → wheel speed, bounded by what the motors can accept
        voltage_limit = min(supply_voltage, self.module_configuration.nominal_voltage)
        for module in self.modules:
            voltage = max(-voltage_limit, min(voltage_limit, module.drive_voltage))
            module.speed = voltage / supply_voltage * self.max_linear_velocity

        # Chassis motion implied by the module states
        chassis = self.kinematics.to_chassis_velocity(self.module_states())
        self.last_chassis_velocity = chassis

        dtheta = chassis.omega * self.period
        self.pose = self.pose.exp(chassis.vx * self.period, chassis.vy * self.period, dtheta)
        self.gyro.advance(dtheta)

        return self.pose

    def set_known_pose(self, pose: Pose) -> None:
        """Force the simulated pose to a known value.

        Used to mirror a pose reset issued to the drivetrain.

        Args:
            pose: New ground-truth pose
        """
        logging.debug(f"Simulation pose set to {pose}")
        self.pose = pose
        for module in self.modules:
            module.speed = 0.0

    def get_diagnostics(self) -> Dict[str, float]:
        """Get simulation diagnostic information.

        Returns:
            Dictionary containing the ground-truth pose, the simulated gyro
            heading, the last chassis velocity and the step count
        """
        return {
            "x": self.pose.x,
            "y": self.pose.y,
            "heading": self.pose.heading,
            "gyro_heading": self.gyro.heading(),
            "vx": self.last_chassis_velocity.vx,
            "vy": self.last_chassis_velocity.vy,
            "omega": self.last_chassis_velocity.omega,
            "steps": self.step_count,
        }
