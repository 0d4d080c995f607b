from __future__ import annotations

import math

import pytest

from navlite.core.types import Pose
from navlite.utils.geometry import (
    bearing,
    circular_difference,
    quaternion_from_yaw,
    signed_angle_difference,
    wrap_angle,
    yaw_from_quaternion,
)


@pytest.mark.parametrize(
    "a,b",
    [(0.0, 0.0), (0.1, 3.0), (-3.0, 3.0), (10.0, -7.5), (math.pi, -math.pi), (0.0, 2.5 * math.pi)],
)
def test_circular_difference_in_range_and_symmetric(a, b):
    d = circular_difference(a, b, math.pi)
    assert 0.0 <= d <= math.pi
    assert d == pytest.approx(circular_difference(b, a, math.pi))


def test_circular_difference_wraps():
    assert circular_difference(math.radians(179), math.radians(-179), math.pi) == pytest.approx(math.radians(2))
    assert circular_difference(0.0, 2 * math.pi, math.pi) == pytest.approx(0.0, abs=1e-12)
    assert circular_difference(0.0, math.pi, math.pi) == pytest.approx(math.pi)


def test_circular_difference_degrees():
    assert circular_difference(350.0, 10.0, 180.0) == pytest.approx(20.0)
    assert circular_difference(90.0, 450.0, 180.0) == pytest.approx(0.0)
    assert circular_difference(0.0, 180.0, 180.0) == pytest.approx(180.0)


def test_wrap_angle():
    assert wrap_angle(190.0, 180.0) == pytest.approx(-170.0)
    assert wrap_angle(-190.0, 180.0) == pytest.approx(170.0)
    assert wrap_angle(math.pi) == pytest.approx(-math.pi)


def test_signed_difference_matches_unsigned_magnitude():
    for target, current in [(1.0, 0.0), (0.0, 1.0), (3.0, -3.0), (-2.5, 2.5), (math.pi, 0.0)]:
        signed = signed_angle_difference(target, current)
        assert abs(signed) == pytest.approx(circular_difference(target, current, math.pi))
    assert signed_angle_difference(1.0, 0.0) > 0
    assert signed_angle_difference(0.0, 1.0) < 0
    # shortest way from 3 rad to -3 rad is counter-clockwise through pi
    assert signed_angle_difference(-3.0, 3.0) > 0


def test_bearing_all_quadrants():
    assert bearing(1.0, 0.0) == pytest.approx(0.0)
    assert bearing(0.0, 1.0) == pytest.approx(math.pi / 2)
    assert bearing(-1.0, 1.0) == pytest.approx(3 * math.pi / 4)
    assert bearing(-1.0, -1.0) == pytest.approx(-3 * math.pi / 4)
    assert abs(bearing(-1.0, 0.0)) == pytest.approx(math.pi)


@pytest.mark.parametrize("yaw", [0.0, 0.5, -1.2, 3.0, -3.0])
def test_quaternion_yaw_conversion(yaw):
    assert yaw_from_quaternion(*quaternion_from_yaw(yaw)) == pytest.approx(yaw)
    assert Pose.from_xyz_yaw(1.0, 2.0, 3.0, yaw).yaw == pytest.approx(yaw)


def test_yaw_ignores_roll_and_pitch():
    # 90 degree roll about x only
    s = math.sin(math.pi / 4)
    assert yaw_from_quaternion(s, 0.0, 0.0, s) == pytest.approx(0.0, abs=1e-12)
