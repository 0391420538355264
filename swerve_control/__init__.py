"""Swerve Control - Control Core for a Four-Module Swerve Drivetrain

Converts a commanded body-frame velocity into four wheel actuator commands,
fuses gyro heading and wheel states into a running pose estimate, and
enforces the drivetrain's speed limits. Runs against real hardware or a
kinematic simulation.

## Architecture Overview

One control tick (SwerveDrivetrain.periodic, drivetrain.py):

### 1. Kinematics (kinematics.py)
Body velocity (vx, vy, ω) → four module (speed, angle) pairs.
- Module order FL, FR, BL, BR everywhere
- Inverse direction recovers chassis velocity by least squares

### 2. Desaturation (desaturation.py)
Uniform downscaling so no wheel exceeds the maximum linear velocity.

### 3. Actuation
Each module receives (voltage, angle), voltage = speed / v_max × MAX_VOLTAGE.

### 4. Heading (gyro.py)
Physical and simulated gyros behind one interface; one is authoritative per
execution context, both are zeroed and set in lockstep.

### 5. Odometry (odometry.py)
Gyro heading + desaturated module states → new pose (constant-curvature
twist integration over one control period).

### 6. Simulation (simulation.py)
Simulated modules and gyro, integrated each tick when no hardware exists.

## Modules

- `config.py` - Dimensions, gearing, module wiring, timing
- `geometry.py` - ChassisVelocity, WheelState, Pose, ModuleGeometry
- `hardware.py` - Module wiring records and actuator/sensor interfaces
- `kinematics.py`, `desaturation.py`, `gyro.py`, `odometry.py`, `simulation.py`
- `drivetrain.py` - SwerveDrivetrain controller and DrivetrainLimits
- `commands.py` - Scripted command profiles
- `runner.py` - asyncio fixed-period loop and logging setup
- `telemetry.py` - CSV run recording
- `plot_results.py` - Plots of recorded runs

## Quick Start

```python
from swerve_control import ChassisVelocity, SwerveDrivetrain

drivetrain = SwerveDrivetrain(simulated=True)
drivetrain.init()
drivetrain.drive(ChassisVelocity(1.0, 0.0, 0.0))
for _ in range(50):
    drivetrain.simulation_periodic()
print(drivetrain.pose)
```

Or use the command-line interface:
```bash
python -m swerve_control --command 1,0,0,2 --fast
```
"""

__version__ = "0.1.0"

# Export key classes for convenience
from .drivetrain import DrivetrainLimits, DrivetrainState, SwerveDrivetrain
from .geometry import ChassisVelocity, ModuleGeometry, Pose, WheelState
from .gyro import GyroSource, LockstepGyro, PhysicalGyro, SimulatedGyro
from .kinematics import SwerveKinematics
from .odometry import SwerveOdometry
from .simulation import SwerveDrivetrainModel

__all__ = [
    "SwerveDrivetrain",
    "DrivetrainLimits",
    "DrivetrainState",
    "ChassisVelocity",
    "ModuleGeometry",
    "Pose",
    "WheelState",
    "GyroSource",
    "LockstepGyro",
    "PhysicalGyro",
    "SimulatedGyro",
    "SwerveKinematics",
    "SwerveOdometry",
    "SwerveDrivetrainModel",
]
