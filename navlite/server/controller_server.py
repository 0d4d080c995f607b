from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence

from ..core.arbiter import GoalArbiter
from ..core.config import ControllerConfig
from ..core.errors import GoalRejectedError
from ..core.goal import FeedbackCallback, GoalHandle
from ..core.state_machine import WaypointNavigator
from ..core.types import NavState, Result, Waypoint
from ..robot.api_interface import ActuationSink
from ..sensors.pose import PoseSource

log = logging.getLogger(__name__)


class ControllerServer:
    """Accepts follow-waypoints goals and runs each one on its own worker thread.

    Only one goal may command the vehicle at a time: :meth:`send_goal` takes
    the arbiter permit synchronously and raises :class:`GoalRejectedError`
    when it is held. Acceptance never waits for an in-flight goal.
    """

    def __init__(
        self,
        pose_source: PoseSource,
        sink: ActuationSink,
        cfg: ControllerConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.pose_source = pose_source
        self.sink = sink
        self.cfg = cfg or ControllerConfig()
        self.arbiter = GoalArbiter()
        self._clock = clock
        self._sleep = sleep
        self._shutdown = threading.Event()
        self._lock = threading.Lock()
        self._active: Optional[GoalHandle] = None
        self._worker: Optional[threading.Thread] = None

    @property
    def busy(self) -> bool:
        return self.arbiter.held

    @property
    def active_goal(self) -> Optional[GoalHandle]:
        with self._lock:
            return self._active

    def send_goal(
        self,
        waypoints: Sequence[Waypoint],
        feedback_callback: Optional[FeedbackCallback] = None,
    ) -> GoalHandle:
        log.info("Received request to follow %d waypoints", len(waypoints))
        if self._shutdown.is_set():
            raise GoalRejectedError("Controller server is shutting down")
        goal = GoalHandle(waypoints, feedback_callback=feedback_callback)
        permit = self.arbiter.try_acquire(owner=goal.goal_id)
        if permit is None:
            log.error("Another goal is commanding the vehicle now. Rejecting request.")
            raise GoalRejectedError("Another goal is commanding the vehicle")

        navigator = WaypointNavigator(
            self.pose_source,
            self.sink,
            self.cfg,
            shutdown=self._shutdown.is_set,
            clock=self._clock,
            sleep=self._sleep,
        )
        worker = threading.Thread(
            target=navigator.execute,
            args=(goal, permit),
            name=f"goal-{goal.goal_id[:8]}",
            daemon=True,
        )
        with self._lock:
            self._active = goal
            self._worker = worker
        try:
            worker.start()
        except RuntimeError:
            log.exception("Could not start worker for goal %s", goal.goal_id)
            with self._lock:
                self._active = None
                self._worker = None
            permit.release()
            goal.finish(Result(status=NavState.ABORTED, missed_waypoints=list(range(len(goal.waypoints)))))
            raise
        log.info("Goal %s accepted", goal.goal_id)
        return goal

    def cancel_active(self) -> bool:
        goal = self.active_goal
        if goal is None or goal.done:
            return False
        goal.cancel()
        return True

    def shutdown(self, timeout: float | None = 5.0) -> None:
        """Abort any running goal and wait for its worker to stop the vehicle."""
        log.info("Shutting down controller server")
        self._shutdown.set()
        with self._lock:
            worker = self._worker
        if worker is not None and worker.is_alive():
            worker.join(timeout=timeout)
            if worker.is_alive():
                log.warning("Goal worker did not exit within %.1fs", timeout or 0.0)


__all__ = ["ControllerServer"]
