"""
Easing & Timing Helpers

Time-shaping functions used by the stage animations. Every function maps a
normalized time (usually 0-1) to a value; none of them keep state.

Shapes used throughout the engine:
- ramp: linear fade-in that saturates early (min(1, t * rate))
- bell: symmetric rise and fall over the animation (sin(t * pi))
- pulse: periodic 0-1 oscillation driven by wall-clock milliseconds
"""

import math


# =============================================================================
# Animation Shapes
# =============================================================================

def clamp01(t: float) -> float:
    if t != t:  # NaN
        return 0.0
    return max(0.0, min(1.0, t))


def ramp(t: float, rate: float = 1.0) -> float:
    """Linear fade-in reaching 1 at t = 1 / rate"""
    return clamp01(t * rate)


def ramp_after(t: float, start: float, rate: float = 1.0) -> float:
    """Like ramp, but stays at 0 until t passes start"""
    if t <= start:
        return 0.0
    return clamp01((t - start) * rate)


def bell(t: float) -> float:
    """Rise and fall: 0 at both ends, 1 in the middle"""
    return max(0.0, math.sin(clamp01(t) * math.pi))


def pulse(time_ms: float, period_ms: float = 1000.0, phase: float = 0.0) -> float:
    """
    Periodic 0-1 oscillation.

    Args:
        time_ms: Wall-clock time in milliseconds
        period_ms: Length of one full cycle
        phase: Offset in cycles (0.5 = half a cycle ahead)
    """
    return (math.sin((time_ms / period_ms + phase) * 2 * math.pi) + 1) / 2


def bounce_in(t: float, overshoot: float = 0.2) -> float:
    """
    Grow from 0 to 1 with a soft overshoot, then hold at 1.

    Used for the newborn's entrance: sin(t * pi) * overshoot + t.
    """
    t = clamp01(t)
    if t >= 1.0:
        return 1.0
    return math.sin(t * math.pi) * overshoot + t

