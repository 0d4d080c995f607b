from .controller_server import ControllerServer
from .follow_waypoints import FollowWaypointsAction, NodeStatus

__all__ = ["ControllerServer", "FollowWaypointsAction", "NodeStatus"]
