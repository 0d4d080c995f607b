from __future__ import annotations

import pytest

from navlite.core.pid import PID


class ManualClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_proportional_only():
    pid = PID(0.5, 10.0, -10.0, kp=2.0, clock=ManualClock())
    assert pid.calculate(3.0, 1.0) == pytest.approx(4.0)


@pytest.mark.parametrize("setpoint,measurement", [(1e9, 0.0), (-1e9, 0.0), (0.0, 123.4), (5.0, 5.0)])
def test_output_is_clamped(setpoint, measurement):
    pid = PID(0.5, 0.25, -0.25, kp=0.7, ki=3.0, kd=1.0, clock=ManualClock())
    for _ in range(5):
        out = pid.calculate(setpoint, measurement)
        assert -0.25 <= out <= 0.25


def test_integral_uses_elapsed_time():
    clock = ManualClock()
    pid = PID(0.5, 100.0, -100.0, kp=0.0, ki=1.0, clock=clock)
    # first call has no history and integrates over the nominal period
    assert pid.calculate(1.0, 0.0) == pytest.approx(0.5)
    clock.now = 2.0
    assert pid.calculate(1.0, 0.0) == pytest.approx(2.5)
    assert pid.integral == pytest.approx(2.5)


def test_derivative_uses_change_in_error():
    clock = ManualClock()
    pid = PID(0.5, 100.0, -100.0, kp=0.0, kd=1.0, clock=clock)
    assert pid.calculate(1.0, 0.0) == pytest.approx(0.0)
    clock.now = 0.25
    assert pid.calculate(2.0, 0.0) == pytest.approx(4.0)


def test_reset_makes_calls_repeatable():
    clock = ManualClock()
    pid = PID(0.5, 5.0, -5.0, kp=0.7, ki=0.3, kd=0.1, clock=clock)
    first = [pid.calculate(2.0, 0.5)]
    clock.now += 0.5
    first.append(pid.calculate(2.0, 1.0))

    pid.reset()
    assert pid.integral == 0.0
    second = [pid.calculate(2.0, 0.5)]
    clock.now += 0.5
    second.append(pid.calculate(2.0, 1.0))
    assert first == pytest.approx(second)


def test_reset_keeps_gains_and_bounds():
    pid = PID.from_gains((0.7, 0.1, 0.2), 0.33, 0.5, clock=ManualClock())
    pid.calculate(1.0, 0.0)
    pid.reset()
    assert (pid.kp, pid.ki, pid.kd) == (0.7, 0.1, 0.2)
    assert (pid.min_output, pid.max_output) == (-0.33, 0.33)


def test_invalid_construction():
    with pytest.raises(ValueError):
        PID(0.0, 1.0, -1.0, kp=1.0)
    with pytest.raises(ValueError):
        PID(0.5, -1.0, 1.0, kp=1.0)
