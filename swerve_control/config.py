"""Configuration parameters for the swerve drivetrain control system.

This module centralizes all configuration parameters including:
- Physical drivetrain dimensions
- Motor and gearing constants used to derive velocity limits
- Per-module hardware identifiers and calibration offsets
- Control loop timing
- Visualization and terminal colors

All parameters are documented with their purpose, units and origin.
Components accept any object exposing these upper-case attributes, so a
test or an alternate robot can supply its own record.
"""

import math

from .hardware import ModuleConfiguration, ModuleHardware

# ============================================================================
# Physical Drivetrain Parameters
# ============================================================================

TRACK_WIDTH = 0.5
"""Distance between left and right module centers (meters).
Fixed by chassis design. Placed on the x axis of the module layout."""

WHEEL_BASE = 0.6
"""Distance between front and back module centers (meters).
Fixed by chassis design. Placed on the y axis of the module layout."""

MAX_VOLTAGE = 12.0
"""Maximum drive voltage commanded to a module (volts).

A wheel speed equal to the maximum linear velocity maps to this voltage.
Also used as the supply voltage when stepping the simulation model.
"""


# ============================================================================
# Motor and Gearing Constants (velocity limit derivation)
# ============================================================================

MOTOR_FREE_SPEED_RPM = 6380.0
"""Drive motor free speed (rpm).

Origin: Falcon 500 datasheet free speed.

Note: this constant is used for the maximum velocity derivation regardless
of MODULE_CONFIGURATION.drive_motor. Changing the motor type there does not
change the derived limit.
"""

DRIVE_REDUCTION = (14.0 / 50.0) * (27.0 / 17.0) * (15.0 / 45.0)
"""Drive gear reduction, output/input (dimensionless).

Origin: SDS MK4 module, L2 gearing (≈ 1 / 6.75).
"""

WHEEL_DIAMETER = 0.10033
"""Drive wheel diameter (meters). SDS MK4 4-inch wheel."""


# ============================================================================
# Module Hardware
# ============================================================================

MODULE_CONFIGURATION = ModuleConfiguration(
    nominal_voltage=12.0,
    drive_current_limit=80.0,
    steer_current_limit=20.0,
    drive_motor="Falcon500",
    steer_motor="Falcon500",
)
"""Electrical settings shared by all four modules."""

FRONT_LEFT_MODULE = ModuleHardware(
    drive_motor_id=1, steer_motor_id=2, steer_encoder_id=9, steer_offset=-math.radians(232.55)
)
"""Front-left module wiring. Steer offset measured with the wheel facing forward."""

FRONT_RIGHT_MODULE = ModuleHardware(
    drive_motor_id=7, steer_motor_id=8, steer_encoder_id=12, steer_offset=-math.radians(331.96)
)
"""Front-right module wiring."""

BACK_LEFT_MODULE = ModuleHardware(
    drive_motor_id=5, steer_motor_id=6, steer_encoder_id=11, steer_offset=-math.radians(255.49)
)
"""Back-left module wiring."""

BACK_RIGHT_MODULE = ModuleHardware(
    drive_motor_id=3, steer_motor_id=4, steer_encoder_id=10, steer_offset=-math.radians(70.66)
)
"""Back-right module wiring."""


# ============================================================================
# Control Loop Timing
# ============================================================================

CONTROL_PERIOD = 0.02
"""Control loop period (seconds).

One periodic() tick per period (50 Hz). Odometry and the simulation model
integrate exactly one period per tick.
"""


# ============================================================================
# Visualization Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary plot color - used for odometry estimates and measured signals."""

PLOT_BLUE = "#2374f7"
"""Secondary plot color - used for simulated ground truth."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides, grids, and secondary elements."""

MODULE_COLORS = ("#f74823", "#2374f7", "#ffa726", "#686a5f")
"""Per-module trace colors in FL, FR, BL, BR order."""

# Terminal color codes (ANSI escape sequences)
TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Run Recording
# ============================================================================

RESULTS_DIR = "results"
"""Base directory (relative to the output directory) for recorded runs."""
