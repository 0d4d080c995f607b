from __future__ import annotations

import time
from typing import Callable, Optional, Sequence


class PID:
    """Single-axis PID controller with output clamping.

    The integral accumulates ``error * dt`` where ``dt`` is the time elapsed
    since the previous :meth:`calculate` call, read from ``clock``. The first
    call after construction or :meth:`reset` has no history and uses the
    nominal period ``dt`` instead, with a zero derivative term.

    Instances carry integral memory: call :meth:`reset` before reusing one for
    an unrelated goal.
    """

    def __init__(
        self,
        dt: float,
        max_output: float,
        min_output: float,
        kp: float,
        ki: float = 0.0,
        kd: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")
        if max_output < min_output:
            raise ValueError(f"max_output ({max_output}) is below min_output ({min_output})")
        self.dt = float(dt)
        self.max_output = float(max_output)
        self.min_output = float(min_output)
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)
        self._clock = clock
        self._integral = 0.0
        self._last_error: Optional[float] = None
        self._last_time: Optional[float] = None

    @classmethod
    def from_gains(
        cls,
        gains: Sequence[float],
        limit: float,
        dt: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> "PID":
        """Build a controller clamped to [-limit, limit] from a (Kp, Ki, Kd) triplet."""
        kp, ki, kd = gains
        return cls(dt, abs(limit), -abs(limit), kp, ki, kd, clock=clock)

    @property
    def integral(self) -> float:
        return self._integral

    def calculate(self, setpoint: float, measurement: float) -> float:
        error = setpoint - measurement
        now = self._clock()
        dt = self.dt
        if self._last_time is not None and now - self._last_time > 0.0:
            dt = now - self._last_time

        self._integral += error * dt
        derivative = 0.0 if self._last_error is None else (error - self._last_error) / dt

        output = self.kp * error + self.ki * self._integral + self.kd * derivative

        self._last_error = error
        self._last_time = now
        return min(self.max_output, max(self.min_output, output))

    def reset(self) -> None:
        """Forget integral and error history; gains and bounds are kept."""
        self._integral = 0.0
        self._last_error = None
        self._last_time = None

    def __repr__(self) -> str:
        return (
            f"PID(kp={self.kp}, ki={self.ki}, kd={self.kd}, "
            f"min={self.min_output}, max={self.max_output})"
        )
