"""navlite: waypoint-following controller with exclusive goal arbitration."""

from .core.arbiter import GoalArbiter, Permit
from .core.config import ControllerConfig, load_config
from .core.errors import GoalRejectedError, NavliteError
from .core.goal import GoalHandle
from .core.state_machine import WaypointNavigator
from .core.types import Feedback, NavState, Pose, Result, Twist, Waypoint
from .server.controller_server import ControllerServer

__version__ = "0.1.0"

__all__ = [
    "ControllerConfig",
    "ControllerServer",
    "Feedback",
    "GoalArbiter",
    "GoalHandle",
    "GoalRejectedError",
    "NavState",
    "NavliteError",
    "Permit",
    "Pose",
    "Result",
    "Twist",
    "Waypoint",
    "WaypointNavigator",
    "load_config",
]
