from __future__ import annotations

import time
from typing import Callable


class Rate:
    """Sleep until the next tick of a fixed-period loop."""

    def __init__(
        self,
        period_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.period_s = float(period_s)
        self._clock = clock
        self._sleep = sleep
        self._last = clock()

    def sleep(self) -> None:
        remaining = self.period_s - (self._clock() - self._last)
        # Overrun ticks do not try to catch up.
        self._sleep(max(0.0, remaining))
        self._last = self._clock()
