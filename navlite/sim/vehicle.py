from __future__ import annotations

import logging
import math
import threading
import time
from typing import List, Optional

import numpy as np

from ..core.types import Pose, Twist
from ..sensors.pose import LatestPose

log = logging.getLogger(__name__)


class SimulatedVehicle:
    """Kinematic vehicle acting as both pose source and actuation sink.

    The last published twist is held and integrated by :meth:`step`: linear
    velocity is rotated from the body frame into the local frame by the
    current yaw, angular z changes the yaw. Published commands are kept in
    ``commands`` for inspection, the oldest dropped beyond ``max_commands``
    (None keeps them all).
    """

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        yaw: float = 0.0,
        max_commands: Optional[int] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._position = np.array([x, y, z], dtype=float)
        self._yaw = float(yaw)
        self._cmd = Twist.zero()
        self.available = True
        self.commands: List[Twist] = []
        self.max_commands = max_commands
        self._running = False
        self._thread: Optional[threading.Thread] = None

    # PoseSource
    def latest(self) -> Optional[Pose]:
        if not self.available:
            return None
        with self._lock:
            x, y, z = (float(v) for v in self._position)
            yaw = self._yaw
        return Pose.from_xyz_yaw(x, y, z, yaw)

    # ActuationSink
    def publish(self, twist: Twist) -> None:
        with self._lock:
            self._cmd = twist.model_copy(deep=True)
            self.commands.append(self._cmd)
            if self.max_commands is not None and len(self.commands) > self.max_commands:
                del self.commands[: len(self.commands) - self.max_commands]

    @property
    def pose(self) -> Pose:
        with self._lock:
            x, y, z = (float(v) for v in self._position)
            return Pose.from_xyz_yaw(x, y, z, self._yaw)

    def step(self, dt: float) -> None:
        with self._lock:
            cmd = self._cmd
            c, s = math.cos(self._yaw), math.sin(self._yaw)
            rot = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
            body = np.array(cmd.linear.as_list())
            self._position = self._position + rot @ body * dt
            self._yaw = math.atan2(
                math.sin(self._yaw + cmd.angular.z * dt),
                math.cos(self._yaw + cmd.angular.z * dt),
            )

    # Real-time integration for the CLI
    def start(self, rate_hz: float = 20.0, pose_buffer: Optional[LatestPose] = None) -> None:
        """Integrate in real time on a background thread, optionally feeding ``pose_buffer``."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._loop, args=(rate_hz, pose_buffer), name="sim-vehicle", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._running = False
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None

    def _loop(self, rate_hz: float, pose_buffer: Optional[LatestPose]) -> None:
        period = 1.0 / max(rate_hz, 1.0)
        last = time.monotonic()
        while self._running:
            now = time.monotonic()
            self.step(now - last)
            if pose_buffer is not None and self.available:
                pose_buffer.update(self.pose)
            last = now
            time.sleep(period)
        log.debug("Simulated vehicle loop exited")
