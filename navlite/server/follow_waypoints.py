from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence

from ..core.errors import GoalRejectedError
from ..core.goal import GoalHandle
from ..core.types import NavState, Waypoint
from .controller_server import ControllerServer

log = logging.getLogger(__name__)


class NodeStatus(Enum):
    IDLE = 0
    RUNNING = 1
    SUCCESS = 2
    FAILURE = 3


class FollowWaypointsAction:
    """Asynchronous behavior-tree action wrapping a follow-waypoints goal.

    The first :meth:`tick` sends the goal; later ticks poll it without
    blocking. A rejected or unsuccessful goal maps to FAILURE.
    """

    def __init__(self, server: ControllerServer, waypoints: Sequence[Waypoint], name: str = "FollowWaypoints") -> None:
        self.server = server
        self.waypoints = list(waypoints)
        self.name = name
        self.status = NodeStatus.IDLE
        self.missed_waypoints: List[int] = []
        self.current_waypoint: Optional[int] = None
        self._goal: Optional[GoalHandle] = None

    def tick(self) -> NodeStatus:
        if self.status in (NodeStatus.SUCCESS, NodeStatus.FAILURE):
            return self.status
        if self._goal is None:
            try:
                self._goal = self.server.send_goal(self.waypoints)
            except GoalRejectedError as exc:
                log.warning("%s: goal rejected: %s", self.name, exc)
                self.status = NodeStatus.FAILURE
                return self.status
            self.status = NodeStatus.RUNNING

        feedback = self._goal.poll_feedback()
        while feedback is not None:
            self.current_waypoint = feedback.current_waypoint
            feedback = self._goal.poll_feedback()

        result = self._goal.result(timeout=0)
        if result is None:
            return NodeStatus.RUNNING
        self.missed_waypoints = list(result.missed_waypoints)
        self.status = NodeStatus.SUCCESS if result.status == NavState.SUCCEEDED else NodeStatus.FAILURE
        log.info("%s finished with %s", self.name, self.status.name)
        return self.status

    def halt(self, timeout: float | None = 5.0) -> None:
        """Cancel an in-flight goal and wait for the vehicle to be stopped."""
        if self._goal is not None and not self._goal.done:
            self._goal.cancel()
            result = self._goal.result(timeout=timeout)
            if result is not None:
                self.missed_waypoints = list(result.missed_waypoints)
        self._goal = None
        self.status = NodeStatus.IDLE


__all__ = ["FollowWaypointsAction", "NodeStatus"]
