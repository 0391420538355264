"""Scripted chassis velocity commands.

This module defines a time-indexed command profile made of constant-velocity
segments. The runner plays it back as the external commander, writing the
drivetrain's command between ticks.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from .geometry import ChassisVelocity, Pose


@dataclass(frozen=True)
class CommandSegment:
    """A chassis velocity held for a fixed duration.

    Attributes:
        velocity: Body-frame command
        duration: Time the command is held (seconds)
    """

    velocity: ChassisVelocity
    duration: float


def parse_segment(text: str) -> CommandSegment:
    """Parse a "vx,vy,omega,seconds" command segment.

    omega is given in degrees per second for readability on the command line.

    Args:
        text: Comma separated vx (m/s), vy (m/s), omega (deg/s), duration (s)

    Returns:
        Parsed CommandSegment

    Raises:
        ValueError: If the text is malformed or the duration is not positive

    Example:
        >>> segment = parse_segment("1.0,0,45,2.5")
        >>> # Drive forward at 1 m/s turning 45°/s for 2.5 s
    """
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Expected 'vx,vy,omega,seconds', got '{text}'")

    vx, vy, omega_deg, duration = (float(p) for p in parts)
    if not math.isfinite(duration) or duration <= 0:
        raise ValueError(f"Segment duration must be positive, got {duration}")

    return CommandSegment(ChassisVelocity(vx, vy, math.radians(omega_deg)), duration)


def parse_pose(text: str) -> Pose:
    """Parse an "x,y,heading_deg" pose."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise ValueError(f"Expected 'x,y,heading_deg', got '{text}'")
    x, y, heading_deg = (float(p) for p in parts)
    return Pose.from_degrees(x, y, heading_deg)


class CommandProfile:
    """Sequence of command segments played back against elapsed time.

    After the last segment the profile commands a stop.
    """

    def __init__(self, segments: Sequence[CommandSegment]):
        self.segments: List[CommandSegment] = list(segments)

    @property
    def duration(self) -> float:
        """Total duration of all segments (seconds)."""
        return sum(segment.duration for segment in self.segments)

    def command_at(self, elapsed: float) -> ChassisVelocity:
        """Return the command active at an elapsed time.

        Args:
            elapsed: Time since the start of the profile (seconds)

        Returns:
            The active command, or a zero command once the profile has ended
        """
        t = 0.0
        for segment in self.segments:
            t += segment.duration
            if elapsed < t:
                return segment.velocity

        return ChassisVelocity()


DEFAULT_PROFILE = CommandProfile(
    [
        CommandSegment(ChassisVelocity(1.0, 0.0, 0.0), 2.0),
        CommandSegment(ChassisVelocity(0.0, 1.0, 0.0), 2.0),
        CommandSegment(ChassisVelocity(1.0, 0.0, math.radians(90.0)), 2.0),
        CommandSegment(ChassisVelocity(0.0, 0.0, math.radians(-90.0)), 1.0),
    ]
)
"""Demo profile: forward, strafe, arc, then turn in place."""
