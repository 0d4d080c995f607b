from __future__ import annotations

from math import atan2, cos, fmod, hypot, pi, sin
from typing import Tuple


def circular_difference(a: float, b: float, half_period: float = pi) -> float:
    """Shortest unsigned distance between two angles on a circle.

    ``half_period`` is pi for radians or 180.0 for degrees; ``a`` and ``b``
    must use the same unit. The result is always in ``[0, half_period]``.
    """
    return half_period - abs(fmod(abs(a - b), 2.0 * half_period) - half_period)


def wrap_angle(angle: float, half_period: float = pi) -> float:
    """Wrap an angle to [-half_period, half_period)."""
    a = (angle + half_period) % (2.0 * half_period) - half_period
    return -half_period if a == half_period else a


def signed_angle_difference(target: float, current: float) -> float:
    """Signed shortest rotation (radians) taking ``current`` onto ``target``.

    Positive means counter-clockwise. The magnitude matches
    ``circular_difference(target, current, pi)``.
    """
    d = wrap_angle(target - current)
    # Prefer +pi over -pi so a target directly behind turns counter-clockwise.
    return pi if d == -pi else d


def yaw_from_quaternion(x: float, y: float, z: float, w: float) -> float:
    """Yaw (rotation about z) in radians, in [-pi, pi]."""
    siny_cosp = 2.0 * (w * z + x * y)
    cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
    return atan2(siny_cosp, cosy_cosp)


def quaternion_from_yaw(yaw: float) -> Tuple[float, float, float, float]:
    """(x, y, z, w) quaternion for a pure rotation about z."""
    return 0.0, 0.0, sin(yaw / 2.0), cos(yaw / 2.0)


def bearing(dx: float, dy: float) -> float:
    """Heading (radians) of the planar vector (dx, dy), correct in all quadrants."""
    return atan2(dy, dx)


def planar_distance(dx: float, dy: float) -> float:
    return hypot(dx, dy)
