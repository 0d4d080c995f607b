from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Protocol

from ..core.types import Pose


class PoseSource(Protocol):
    """Latest known vehicle pose, or None while it is unavailable."""

    def latest(self) -> Optional[Pose]: ...


class LatestPose:
    """Thread-safe holder for the most recent pose reported by a producer.

    ``latest()`` returns None until the first update and whenever the stored
    pose is older than ``max_age_s``.
    """

    def __init__(self, max_age_s: Optional[float] = 1.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_age_s = max_age_s
        self._clock = clock
        self._lock = threading.Lock()
        self._pose: Optional[Pose] = None
        self._stamp = 0.0

    def update(self, pose: Pose, stamp: Optional[float] = None) -> None:
        with self._lock:
            self._pose = pose.model_copy(deep=True)
            self._stamp = self._clock() if stamp is None else stamp

    def clear(self) -> None:
        with self._lock:
            self._pose = None

    def latest(self) -> Optional[Pose]:
        with self._lock:
            pose = self._pose
            stamp = self._stamp
        if pose is None:
            return None
        if self.max_age_s is not None and self._clock() - stamp > self.max_age_s:
            return None
        return pose
