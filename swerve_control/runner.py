#!/usr/bin/env python3
"""
Fixed-period control loop for the swerve drivetrain.

This module plays the role of the scheduler: it initializes a drivetrain, then
ticks it once per control period on an asyncio event loop, writing the next
velocity command from a command profile between ticks and optionally
recording telemetry. Everything runs on one thread; a tick never awaits, so
commands and resets are always applied between ticks.
"""

import asyncio
import logging
import signal
from typing import Any, Optional

from swerve_control.commands import CommandProfile
from swerve_control.config import TERM_BLUE, TERM_RESET
from swerve_control.drivetrain import DrivetrainState, SwerveDrivetrain
from swerve_control.geometry import Pose
from swerve_control.telemetry import TelemetryRecorder


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        else:
            return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels (including the per-tick drivetrain
                 dump) with timestamps. If False, show INFO without timestamps
                 and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        formatter = CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


class DriveLoop:
    """Cooperative scheduler driving a SwerveDrivetrain at a fixed period.

    Attributes:
        drivetrain: The drivetrain being ticked (owned by the caller).
        profile: Command profile played back as the external commander.
        period: Control period (seconds).
        realtime: If True, ticks are paced to wall-clock time. If False, the
            loop only yields to the event loop between ticks.
        recorder: Optional telemetry recorder fed after every tick.
        should_stop: Flag indicating whether to stop the loop.
        tick_count: Number of ticks run so far.
    """

    def __init__(
        self,
        drivetrain: SwerveDrivetrain,
        profile: CommandProfile,
        period: Optional[float] = None,
        realtime: bool = True,
        recorder: Optional[TelemetryRecorder] = None,
    ) -> None:
        """Initialize the loop.

        Args:
            drivetrain: Drivetrain to tick. Initialized by run() if needed.
            profile: Command profile to play back.
            period: Control period (seconds). Defaults to the drivetrain's
                configured CONTROL_PERIOD.
            realtime: Pace ticks to wall-clock time.
            recorder: Optional telemetry recorder (already set up).

        Raises:
            ValueError: If period is not positive.
        """
        if period is None:
            period = drivetrain.config.CONTROL_PERIOD
        if period <= 0:
            raise ValueError(f"Control period must be positive, got {period}")

        self.drivetrain = drivetrain
        self.profile = profile
        self.period = period
        self.realtime = realtime
        self.recorder = recorder
        self.should_stop: bool = False
        self.tick_count: int = 0

    def tick(self) -> Pose:
        """Write the profile's command for this tick, then run one drivetrain tick."""
        elapsed = self.tick_count * self.period

        if self.drivetrain.state is DrivetrainState.RUNNING:
            self.drivetrain.drive(self.profile.command_at(elapsed))

        if self.drivetrain.simulated:
            pose = self.drivetrain.simulation_periodic()
        else:
            pose = self.drivetrain.periodic()

        if self.recorder is not None:
            self.recorder.record(elapsed, self.drivetrain)

        self.tick_count += 1
        return pose

    async def run(self, start_pose: Optional[Pose] = None) -> Pose:
        """Run the loop until the profile ends or stop() is called.

        After the profile ends the drivetrain is disabled and ticked once more
        so the stop command reaches the modules.

        Args:
            start_pose: Pose to anchor at before the first tick. Defaults to
                the origin set by init().

        Returns:
            The last published pose.
        """
        if self.drivetrain.state is DrivetrainState.UNINITIALIZED:
            self.drivetrain.init()
        if start_pose is not None:
            self.drivetrain.zero_states(start_pose)

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        total_ticks = int(round(self.profile.duration / self.period))

        logging.info(f"{TERM_BLUE}✓ Running command profile ({self.profile.duration:.1f}s){TERM_RESET}")

        pose = self.drivetrain.pose
        while not self.should_stop and self.tick_count < total_ticks:
            try:
                pose = self.tick()
            except Exception as e:
                logging.error(f"Control tick {self.tick_count} failed: {e}", exc_info=True)
                raise

            if self.realtime:
                next_tick = start_time + self.tick_count * self.period
                await asyncio.sleep(max(0.0, next_tick - loop.time()))
            else:
                await asyncio.sleep(0)

        self.drivetrain.disable()
        pose = self.tick()

        logging.info(f"{TERM_BLUE}→ Final pose: {pose}{TERM_RESET}")
        return pose

    def stop(self) -> None:
        """Signal the loop to stop."""
        self.should_stop = True


async def main(
    profile: CommandProfile,
    start_pose: Optional[Pose] = None,
    output_dir: str = ".",
    record: bool = True,
    realtime: bool = True,
    config: Any = None,
) -> Pose:
    """Run a simulated drivetrain against a command profile.

    Creates the drivetrain, sets up signal handlers for graceful shutdown and
    runs the loop, recording telemetry when requested.

    Args:
        profile: Command profile to play back.
        start_pose: Starting pose (default: origin).
        output_dir: Base directory for recorded runs.
        record: Record telemetry CSV files.
        realtime: Pace ticks to wall-clock time.
        config: Configuration record (default: swerve_control.config).

    Returns:
        The last published pose.
    """
    drivetrain = SwerveDrivetrain(config=config, simulated=True)
    recorder = TelemetryRecorder(output_dir=output_dir) if record else None

    if recorder is not None:
        recorder.setup()
    try:
        drive_loop = DriveLoop(drivetrain, profile, realtime=realtime, recorder=recorder)

        loop = asyncio.get_running_loop()

        def signal_handler() -> None:
            """Handle shutdown signals (SIGINT, SIGTERM)."""
            logging.info("\nShutdown signal received...")
            drive_loop.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, signal_handler)

        return await drive_loop.run(start_pose)
    finally:
        if recorder is not None:
            recorder.cleanup()
