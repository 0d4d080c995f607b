from __future__ import annotations

import logging
import time
from contextlib import nullcontext
from typing import Callable, Optional

from ..mission.waypoint_manager import WaypointManager
from ..robot.api_interface import ActuationSink
from ..sensors.pose import PoseSource
from ..utils.rate import Rate
from .arbiter import Permit
from .config import ControllerConfig
from .controllers import AxisControllers, approach_step, final_yaw_step
from .goal import GoalHandle
from .types import Feedback, NavState, Result, Twist

log = logging.getLogger(__name__)


class WaypointNavigator:
    """Executes one goal: steer to each waypoint in turn, then settle the final yaw.

    Each tick reads the pose, computes a command and publishes it, then sleeps
    until the next tick. Cancellation, the shutdown signal and the optional
    per-waypoint timeout are checked once per tick. Every exit path publishes
    a stop command ``stop_repeats`` times and releases the permit before the
    Result is delivered.
    """

    def __init__(
        self,
        pose_source: PoseSource,
        sink: ActuationSink,
        cfg: ControllerConfig,
        *,
        shutdown: Callable[[], bool] = lambda: False,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.pose_source = pose_source
        self.sink = sink
        self.cfg = cfg
        self.pids = AxisControllers.from_config(cfg, clock=clock)
        self.state = NavState.IDLE
        self._shutdown = shutdown
        self._clock = clock
        self._sleep = sleep

    def execute(self, goal: GoalHandle, permit: Optional[Permit] = None) -> Result:
        mgr = WaypointManager(goal.waypoints)
        with permit if permit is not None else nullcontext():
            try:
                status = self._run(goal, mgr)
            except Exception:
                log.exception("Goal %s failed at waypoint %d", goal.goal_id, mgr.index)
                status = NavState.ABORTED
            finally:
                self._stop()

        result = Result(status=status, missed_waypoints=mgr.missed())
        self._set_state(goal, status)
        goal.finish(result)
        if status == NavState.SUCCEEDED:
            log.info("Goal %s succeeded", goal.goal_id)
        else:
            log.info("Goal %s %s, missed waypoints %s", goal.goal_id, status.name.lower(), result.missed_waypoints)
        return result

    def _run(self, goal: GoalHandle, mgr: WaypointManager) -> NavState:
        cfg = self.cfg
        log.info("Executing goal %s with %d waypoints", goal.goal_id, len(mgr))
        self.pids.reset()
        rate = Rate(cfg.tick_period_s, clock=self._clock, sleep=self._sleep)
        last = mgr.last()
        if last is None:
            return NavState.SUCCEEDED

        goal.publish_feedback(Feedback(current_waypoint=0))
        self._set_state(goal, NavState.ORIENTING)
        waypoint_started = self._clock()

        while True:
            wp = mgr.current()
            if wp is None:
                break
            interrupted = self._interrupted(goal, waypoint_started)
            if interrupted is not None:
                return interrupted

            pose = self.pose_source.latest()
            if pose is None:
                log.debug("Pose unavailable, skipping tick")
                rate.sleep()
                continue

            step = approach_step(self.pids, pose, wp, cfg)
            if step.close:
                log.info("Reached waypoint %d [%.2fm]", mgr.index, step.distance)
                nxt = mgr.advance()
                if nxt is not None:
                    goal.publish_feedback(Feedback(current_waypoint=nxt))
                    waypoint_started = self._clock()
                rate.sleep()
                continue

            if step.aligned:
                self._set_state(goal, NavState.APPROACHING)
                log.debug("Direction is good, distance now %.2fm", step.distance)
            else:
                self._set_state(goal, NavState.ORIENTING)
                log.debug(
                    "Direction is not good. Current %.2f, target %.2f (error %.3f)",
                    pose.yaw,
                    step.bearing,
                    step.yaw_error,
                )
            self.sink.publish(step.command)
            rate.sleep()

        # Settle on the orientation requested by the last waypoint.
        target_yaw = last.yaw
        self._set_state(goal, NavState.FINAL_YAW_SETTLE)
        while True:
            interrupted = self._interrupted(goal, None)
            if interrupted is not None:
                return interrupted
            pose = self.pose_source.latest()
            if pose is None:
                log.debug("Pose unavailable, skipping tick")
                rate.sleep()
                continue
            ystep = final_yaw_step(self.pids, pose, target_yaw, cfg)
            if ystep.settled:
                log.debug("Final yaw settled (error %.3f)", ystep.yaw_error)
                return NavState.SUCCEEDED
            self.sink.publish(ystep.command)
            rate.sleep()

    def _interrupted(self, goal: GoalHandle, waypoint_started: Optional[float]) -> Optional[NavState]:
        if goal.is_canceling:
            return NavState.CANCELED
        if self._shutdown():
            log.warning("Shutdown requested while executing goal %s", goal.goal_id)
            return NavState.ABORTED
        timeout = self.cfg.waypoint_timeout_s
        if timeout is not None and waypoint_started is not None and self._clock() - waypoint_started > timeout:
            log.warning("Waypoint not reached within %.1fs, aborting goal %s", timeout, goal.goal_id)
            return NavState.ABORTED
        return None

    def _stop(self) -> None:
        for i in range(self.cfg.stop_repeats):
            if i:
                self._sleep(self.cfg.tick_period_s)
            try:
                self.sink.publish(Twist.zero())
            except Exception as exc:
                log.warning("Failed to publish stop command: %s", exc)

    def _set_state(self, goal: GoalHandle, state: NavState) -> None:
        self.state = state
        goal.set_status(state)
