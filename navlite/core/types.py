from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..utils.geometry import quaternion_from_yaw, yaw_from_quaternion


class Vector3(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_list(self) -> List[float]:
        return [self.x, self.y, self.z]


class Quaternion(BaseModel):
    """Unit quaternion, identity by default."""

    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


class Pose(BaseModel):
    """Position in the local frame plus orientation."""

    position: Vector3 = Field(default_factory=Vector3)
    orientation: Quaternion = Field(default_factory=Quaternion)

    @property
    def yaw(self) -> float:
        q = self.orientation
        return yaw_from_quaternion(q.x, q.y, q.z, q.w)

    @classmethod
    def from_xyz_yaw(cls, x: float, y: float, z: float = 0.0, yaw: float = 0.0):
        qx, qy, qz, qw = quaternion_from_yaw(yaw)
        return cls(
            position=Vector3(x=x, y=y, z=z),
            orientation=Quaternion(x=qx, y=qy, z=qz, w=qw),
        )


class Waypoint(Pose):
    """Target position and orientation the vehicle must reach before advancing."""


class Twist(BaseModel):
    """Motion command: linear velocity (m/s) and angular rate (rad/s), body frame."""

    linear: Vector3 = Field(default_factory=Vector3)
    angular: Vector3 = Field(default_factory=Vector3)

    @classmethod
    def zero(cls) -> "Twist":
        return cls()

    @property
    def is_zero(self) -> bool:
        return not any(self.linear.as_list()) and not any(self.angular.as_list())


class NavState(Enum):
    IDLE = 0
    ORIENTING = 1
    APPROACHING = 2
    FINAL_YAW_SETTLE = 3
    SUCCEEDED = 4
    CANCELED = 5
    ABORTED = 6

    @property
    def is_terminal(self) -> bool:
        return self in (NavState.SUCCEEDED, NavState.CANCELED, NavState.ABORTED)


class Feedback(BaseModel):
    current_waypoint: int


class Result(BaseModel):
    status: NavState
    missed_waypoints: List[int] = Field(default_factory=list)
