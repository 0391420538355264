"""Swerve drivetrain controller.

This module ties the control pipeline together and runs it once per control
period:

    command → kinematics → desaturation → module actuators
    gyro heading + desaturated module states → odometry → published pose

In a simulated execution context the simulation model replaces the hardware:
it supplies the module states, receives the actuator commands, advances the
simulated gyro and keeps a ground-truth pose.

The controller is an ordinary object owned by whoever schedules it. It holds
no global state, so several drivetrains (e.g. in tests) can coexist.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .desaturation import desaturate_wheel_speeds
from .geometry import (
    MODULE_NAMES,
    ChassisVelocity,
    ModuleGeometry,
    ModuleStates,
    Pose,
    stationary_states,
)
from .gyro import LockstepGyro, PhysicalGyro, SimulatedGyro
from .hardware import ModuleActuator, ModuleConfiguration, ModuleHardware, YawSensor
from .kinematics import SwerveKinematics
from .odometry import SwerveOdometry
from .simulation import SwerveDrivetrainModel

ActuatorFactory = Callable[[str, ModuleHardware, ModuleConfiguration], ModuleActuator]
"""Builds the actuator for one module from its name, wiring and configuration."""


class DrivetrainState(Enum):
    """Lifecycle state of the drivetrain controller."""

    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    DISABLED = "disabled"


@dataclass(frozen=True)
class DrivetrainLimits:
    """Attainable drivetrain speeds.

    Attributes:
        max_linear_velocity: Straight-line top speed (m/s)
        max_angular_velocity: Top rotation rate in place (rad/s)
    """

    max_linear_velocity: float
    max_angular_velocity: float

    @classmethod
    def from_config(cls, config: Any, geometry: ModuleGeometry) -> "DrivetrainLimits":
        """Derive the limits from motor free speed, gearing and geometry.

        max_linear = free_speed_rpm / 60 * drive_reduction * wheel_diameter * π
        max_angular = max_linear / hypot(track_width / 2, wheel_base / 2)

        Args:
            config: Configuration record (see swerve_control.config)
            geometry: Module layout, used for the rotation radius

        Returns:
            DrivetrainLimits for this drivetrain
        """
        max_linear = (
            config.MOTOR_FREE_SPEED_RPM
            / 60.0
            * config.DRIVE_REDUCTION
            * config.WHEEL_DIAMETER
            * math.pi
        )
        max_angular = max_linear / geometry.max_radius()
        return cls(max_linear, max_angular)


class SwerveDrivetrain:
    """Periodic controller for a four-module swerve drivetrain.

    Lifecycle: UNINITIALIZED --init()--> RUNNING <--disable()/enable()--> DISABLED.
    The scheduler calls init() once, then periodic() (or simulation_periodic()
    in a simulated context) once per control period in both RUNNING and
    DISABLED. Disabling commands a stop but keeps the loop ticking.

    Attributes:
        config: Configuration record
        simulated: True when running against the simulation model
        state: Current lifecycle state
        limits: Derived speed limits (set by init)
        kinematics: Kinematic model (set by init)
        gyro: Lockstep heading source; heading comes from the gyro that is
            authoritative for this execution context (set by init)
        physical_gyro: Hardware-backed gyro (set by init)
        simulated_gyro: Simulation-backed gyro, None in a real context
        odometry: Pose estimator (set by init)
        simulation: Simulation model, None in a real context
        actuators: Module actuators in module order (set by init)
    """

    def __init__(
        self,
        config: Any = None,
        simulated: bool = False,
        actuator_factory: Optional[ActuatorFactory] = None,
        yaw_sensor: Optional[YawSensor] = None,
    ) -> None:
        """Create an uninitialized drivetrain.

        Args:
            config: Configuration record. If None, uses swerve_control.config.
            simulated: Select the simulated execution context
            actuator_factory: Builds each module's actuator at init(). Required
                in a real context. In a simulated context the simulation
                model's modules are used when this is None; otherwise the
                simulation modules receive the same commands as the
                factory's actuators.
            yaw_sensor: Hardware heading sensor for the physical gyro
        """
        # Import config if not provided
        if config is None:
            from swerve_control import config as cfg
        else:
            cfg = config

        self.config = cfg
        self.simulated = simulated
        self.actuator_factory = actuator_factory
        self.yaw_sensor = yaw_sensor

        self.state = DrivetrainState.UNINITIALIZED

        # Latest command; None until the first drive() call
        self._command: Optional[ChassisVelocity] = None

        self.limits: Optional[DrivetrainLimits] = None
        self.kinematics: Optional[SwerveKinematics] = None
        self.gyro: Optional[LockstepGyro] = None
        self.physical_gyro: Optional[PhysicalGyro] = None
        self.simulated_gyro: Optional[SimulatedGyro] = None
        self.odometry: Optional[SwerveOdometry] = None
        self.simulation: Optional[SwerveDrivetrainModel] = None
        self.actuators: Sequence[ModuleActuator] = ()
        # Simulated modules that also receive commands when actuators come from a factory
        self._simulation_mirrors: Sequence[ModuleActuator] = ()

        self._pose = Pose()
        self._module_states: ModuleStates = stationary_states()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> None:
        """Build the control pipeline and start at the origin.

        Raises:
            RuntimeError: If called more than once
            ValueError: If the configuration or actuator wiring is invalid
        """
        if self.state is not DrivetrainState.UNINITIALIZED:
            raise RuntimeError("Drivetrain is already initialized")

        cfg = self.config
        self._validate_config()

        geometry = ModuleGeometry.from_dimensions(cfg.TRACK_WIDTH, cfg.WHEEL_BASE)
        self.limits = DrivetrainLimits.from_config(cfg, geometry)
        self.kinematics = SwerveKinematics(geometry)

        logging.info(
            f"Drivetrain limits: {self.limits.max_linear_velocity:.3f} m/s, "
            f"{self.limits.max_angular_velocity:.3f} rad/s"
        )
        drive_motor = cfg.MODULE_CONFIGURATION.drive_motor
        if drive_motor != "Falcon500":
            logging.warning(
                f"Max velocity is derived from a fixed {cfg.MOTOR_FREE_SPEED_RPM:.0f} rpm free "
                f"speed; configured drive motor {drive_motor} is not taken into account"
            )

        # Heading sources: one authoritative per execution context
        if self.yaw_sensor is None and not self.simulated:
            logging.warning("No yaw sensor attached; heading will read a constant 0")
        self.physical_gyro = PhysicalGyro(self.yaw_sensor)
        if self.simulated:
            self.simulated_gyro = SimulatedGyro()
            self.simulation = SwerveDrivetrainModel(
                self.kinematics,
                self.simulated_gyro,
                self.limits.max_linear_velocity,
                period=cfg.CONTROL_PERIOD,
                module_configuration=cfg.MODULE_CONFIGURATION,
            )
            self.gyro = LockstepGyro(self.simulated_gyro, [self.physical_gyro])
        else:
            self.gyro = LockstepGyro(self.physical_gyro)

        self.actuators = self._create_actuators()

        self.odometry = SwerveOdometry(
            self.kinematics, self.gyro.heading(), period=cfg.CONTROL_PERIOD
        )

        self.state = DrivetrainState.RUNNING
        self.set_odometry(Pose())

    def disable(self) -> None:
        """Enter DISABLED and command a stop. The loop keeps running."""
        self._require_initialized()
        self.stop()
        if self.state is not DrivetrainState.DISABLED:
            logging.info("Drivetrain disabled")
        self.state = DrivetrainState.DISABLED

    def enable(self) -> None:
        """Return to RUNNING without re-initializing."""
        self._require_initialized()
        if self.state is not DrivetrainState.RUNNING:
            logging.info("Drivetrain enabled")
        self.state = DrivetrainState.RUNNING

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def drive(self, velocity: ChassisVelocity) -> None:
        """Set the chassis velocity for the next tick (last write wins).

        A command with a non-finite component is replaced by a stop.

        Args:
            velocity: Body-frame chassis velocity
        """
        if not velocity.is_finite():
            logging.warning(f"Ignoring non-finite drive command {velocity}; stopping")
            velocity = ChassisVelocity()
        self._command = velocity

    def stop(self) -> None:
        self.drive(ChassisVelocity(0.0, 0.0, 0.0))

    # ------------------------------------------------------------------
    # Periodic update
    # ------------------------------------------------------------------

    def periodic(self) -> Pose:
        """Run one control tick.

        Returns:
            The published pose for this tick
        """
        self._require_initialized()

        command = self._command
        states: Optional[ModuleStates]
        if command is None:
            states = None
        elif self.simulated:
            states = self.simulation.compute_module_states(command)
        else:
            states = self.kinematics.to_wheel_states(command)

        if states is not None:
            self._module_states = self._apply_states(states)
            odometry_states = self._module_states
        else:
            # No command yet: nothing is actuated, the wheels are at rest
            odometry_states = stationary_states()

        heading = self.gyro.heading()
        self._pose = self.odometry.update(heading, odometry_states)

        if self.simulated:
            self.simulation.step(self.state is DrivetrainState.DISABLED, self.config.MAX_VOLTAGE)

        self._dump_info()
        return self._pose

    def simulation_periodic(self) -> Pose:
        """Run one control tick in a simulated context.

        Raises:
            RuntimeError: If the drivetrain is not simulated
        """
        if not self.simulated:
            raise RuntimeError("simulation_periodic() requires a simulated drivetrain")
        return self.periodic()

    # ------------------------------------------------------------------
    # Resets
    # ------------------------------------------------------------------

    def set_odometry(self, pose: Pose) -> None:
        """Re-anchor the pose estimate, the gyros and the simulation at pose.

        Args:
            pose: New starting pose
        """
        self._require_initialized()

        self.gyro.set_heading(pose.heading)
        self.odometry.reset(pose, self.gyro.heading())
        if self.simulated:
            self.simulation.set_known_pose(pose)
        self._pose = pose

        logging.info(f"Starting Position: {pose}")

    def zero_gyroscope(self) -> None:
        """Make the current orientation heading zero on every gyro.

        The pose estimate keeps its translation and takes heading zero, so
        integration continues from the new reference.
        """
        self._require_initialized()

        self.gyro.zero()
        self._pose = Pose(self._pose.x, self._pose.y, 0.0)
        self.odometry.reset(self._pose, self.gyro.heading())

    def zero_states(self, pose: Pose) -> None:
        """Stop all modules aligned to pose's heading and re-anchor at pose.

        All four wheels are set to speed 0 at the target pose's rotation,
        then the gyros, odometry and simulation are reset to pose.

        Args:
            pose: Target pose
        """
        self._require_initialized()

        self._module_states = self._apply_states(stationary_states(pose.heading))

        self.gyro.set_heading(pose.heading)
        self.odometry.reset(pose, self.gyro.heading())
        if self.simulated:
            self.simulation.set_known_pose(pose)
        self._pose = pose

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def pose(self) -> Pose:
        """Most recently published pose."""
        return self._pose

    @property
    def heading(self) -> float:
        """Heading (rad) of the authoritative gyro."""
        self._require_initialized()
        return self.gyro.heading()

    @property
    def module_states(self) -> ModuleStates:
        """Most recently actuated (desaturated) module states."""
        return self._module_states

    @property
    def command(self) -> Optional[ChassisVelocity]:
        return self._command

    def drive_voltage(self, speed: float) -> float:
        """Convert a wheel speed (m/s) to the drive voltage sent to a module.

        voltage = speed / max_linear_velocity * MAX_VOLTAGE, or 0 when the
        derived max linear velocity is not positive.
        """
        max_linear = self.limits.max_linear_velocity
        if max_linear <= 0:
            return 0.0
        return speed / max_linear * self.config.MAX_VOLTAGE

    def get_diagnostics(self) -> Dict[str, Any]:
        """Get drivetrain diagnostic information for logging.

        Returns:
            Dictionary with the lifecycle state, pose, heading of each gyro,
            module states and, when simulated, the ground-truth pose
        """
        self._require_initialized()

        diagnostics: Dict[str, Any] = {
            "state": self.state.value,
            "x": self._pose.x,
            "y": self._pose.y,
            "heading": self._pose.heading,
            "gyro_heading": self.gyro.heading(),
            "physical_gyro_heading": self.physical_gyro.heading(),
            "speeds": [s.speed for s in self._module_states],
            "angles": [s.angle for s in self._module_states],
        }
        if self.simulated:
            diagnostics["simulated_gyro_heading"] = self.simulated_gyro.heading()
            diagnostics["sim_x"] = self.simulation.pose.x
            diagnostics["sim_y"] = self.simulation.pose.y
            diagnostics["sim_heading"] = self.simulation.pose.heading
        return diagnostics

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_states(self, states: ModuleStates) -> ModuleStates:
        """Desaturate states and send them to the module actuators.

        Returns:
            The desaturated states that were actuated
        """
        states = desaturate_wheel_speeds(states, self.limits.max_linear_velocity)

        for actuator, state in zip(self.actuators, states):
            actuator.set(self.drive_voltage(state.speed), state.angle)
        for module, state in zip(self._simulation_mirrors, states):
            module.set(self.drive_voltage(state.speed), state.angle)

        return states

    def _create_actuators(self) -> List[ModuleActuator]:
        cfg = self.config
        hardware = (
            cfg.FRONT_LEFT_MODULE,
            cfg.FRONT_RIGHT_MODULE,
            cfg.BACK_LEFT_MODULE,
            cfg.BACK_RIGHT_MODULE,
        )

        if self.actuator_factory is None:
            if not self.simulated:
                raise ValueError("An actuator factory is required when not simulated")
            return list(self.simulation.modules)

        actuators = []
        for name, module_hardware in zip(MODULE_NAMES, hardware):
            actuator = self.actuator_factory(name, module_hardware, cfg.MODULE_CONFIGURATION)
            if actuator is None:
                raise ValueError(f"Actuator factory returned no actuator for module {name}")
            actuators.append(actuator)

        if self.simulated:
            self._simulation_mirrors = self.simulation.modules
        return actuators

    def _validate_config(self) -> None:
        cfg = self.config
        for name in ("TRACK_WIDTH", "WHEEL_BASE", "MAX_VOLTAGE", "CONTROL_PERIOD"):
            value = getattr(cfg, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value}")

        hardware = (
            cfg.FRONT_LEFT_MODULE,
            cfg.FRONT_RIGHT_MODULE,
            cfg.BACK_LEFT_MODULE,
            cfg.BACK_RIGHT_MODULE,
        )
        motor_ids = [h.drive_motor_id for h in hardware] + [h.steer_motor_id for h in hardware]
        if len(set(motor_ids)) != len(motor_ids):
            raise ValueError(f"Duplicate motor CAN identifiers in module wiring: {motor_ids}")
        encoder_ids = [h.steer_encoder_id for h in hardware]
        if len(set(encoder_ids)) != len(encoder_ids):
            raise ValueError(f"Duplicate encoder CAN identifiers in module wiring: {encoder_ids}")

    def _require_initialized(self) -> None:
        if self.state is DrivetrainState.UNINITIALIZED:
            raise RuntimeError("Drivetrain is not initialized; call init() first")

    def _dump_info(self) -> None:
        lines = [
            "-----------------",
            f"Robot Position: {self._pose}",
            f"Odometry Position: {self.odometry.pose}",
            f"Drivetrain Gyro Heading: {math.degrees(self.physical_gyro.heading()):.2f}°",
        ]
        if self.simulated:
            lines.append(
                f"Drivetrain Model Gyro Heading: {math.degrees(self.simulated_gyro.heading()):.2f}°"
            )
        lines.append("-----------------")
        logging.debug("\n".join(lines))
