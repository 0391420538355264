"""Hardware-facing records and interfaces.

The control core never talks to motor controllers or IMUs directly. It sees:
- ModuleHardware: identifiers and calibration offset of one module
- ModuleConfiguration: electrical settings shared by all modules
- ModuleActuator: sink accepting a (voltage, steer angle) command
- YawSensor: source of a raw yaw reading

Concrete hardware drivers live outside this package and are handed in when
the drivetrain is constructed.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ModuleHardware:
    """Wiring of one swerve module.

    Attributes:
        drive_motor_id: CAN identifier of the drive motor
        steer_motor_id: CAN identifier of the steer motor
        steer_encoder_id: CAN identifier of the absolute steer encoder
        steer_offset: Encoder reading (rad) when the wheel points straight ahead
    """

    drive_motor_id: int
    steer_motor_id: int
    steer_encoder_id: int
    steer_offset: float = 0.0


@dataclass(frozen=True)
class ModuleConfiguration:
    """Electrical and motor settings applied to every module.

    Attributes:
        nominal_voltage: Voltage the motors are rated and compensated for (V)
        drive_current_limit: Drive motor current limit (A)
        steer_current_limit: Steer motor current limit (A)
        drive_motor: Drive motor type name
        steer_motor: Steer motor type name
    """

    nominal_voltage: float = 12.0
    drive_current_limit: float = 80.0
    steer_current_limit: float = 20.0
    drive_motor: str = "Falcon500"
    steer_motor: str = "Falcon500"


class ModuleActuator(Protocol):
    """A swerve module that accepts open-loop drive voltage and a steer angle."""

    def set(self, drive_voltage: float, steer_angle: float) -> None:
        ...


class YawSensor(Protocol):
    """A heading sensor reporting its raw yaw (rad, counter-clockwise positive)."""

    def read_yaw(self) -> float:
        ...
