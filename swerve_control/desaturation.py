"""Wheel speed desaturation.

Scales a set of module states down uniformly so that no wheel is asked to
exceed the drivetrain's attainable speed, keeping the ratio between wheels
(and therefore the direction of chassis motion) intact.
"""

import logging
import math
from typing import Sequence

from .geometry import ModuleStates, WheelState


def desaturate_wheel_speeds(states: Sequence[WheelState], max_speed: float) -> ModuleStates:
    """Rescale wheel speeds so none exceeds max_speed.

    If the fastest wheel exceeds max_speed, every speed is multiplied by
    max_speed / max(|speed_i|). Angles are never changed. When no wheel is
    over the limit the states are returned unchanged.

    An infinite max_speed means no limit. A NaN or non-positive max_speed,
    or a non-finite wheel speed, cannot be scaled meaningfully. In that case
    every wheel is stopped at its current angle and a warning is logged.

    Args:
        states: Module states in module order
        max_speed: Maximum attainable wheel speed (m/s)

    Returns:
        Desaturated module states in the same order
    """
    states = tuple(states)

    speeds = [state.speed for state in states]
    if math.isnan(max_speed) or max_speed <= 0.0 or not all(
        math.isfinite(s) for s in speeds
    ):
        logging.warning(
            f"Cannot desaturate wheel speeds {speeds} against limit {max_speed}; "
            f"stopping all modules"
        )
        # nan * 0 is nan, so build stopped states rather than scaling
        return tuple(WheelState(0.0, state.angle) for state in states)

    real_max_speed = max(abs(s) for s in speeds)
    if real_max_speed <= max_speed:
        return states

    scale = max_speed / real_max_speed
    return tuple(state.scaled(scale) for state in states)
