from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from ..utils.geometry import bearing, circular_difference, planar_distance, signed_angle_difference
from .config import ControllerConfig
from .pid import PID
from .types import Pose, Twist, Vector3, Waypoint


@dataclass
class AxisControllers:
    """The three PIDs driving one goal: forward speed, vertical speed and yaw rate."""

    forward: PID
    vertical: PID
    yaw: PID

    @classmethod
    def from_config(cls, cfg: ControllerConfig, clock: Callable[[], float] = time.monotonic) -> "AxisControllers":
        dt = cfg.tick_period_s
        return cls(
            forward=PID.from_gains(cfg.pid_xy, cfg.max_speed_xy, dt, clock=clock),
            vertical=PID.from_gains(cfg.pid_z, cfg.max_speed_z, dt, clock=clock),
            yaw=PID.from_gains(cfg.pid_yaw, cfg.max_yaw_speed, dt, clock=clock),
        )

    def reset(self) -> None:
        self.forward.reset()
        self.vertical.reset()
        self.yaw.reset()


@dataclass
class ApproachStep:
    """Outcome of one approach tick toward a waypoint."""

    distance: float
    close: bool
    bearing: float = 0.0
    yaw_error: float = 0.0
    aligned: bool = False
    command: Twist | None = None


def approach_step(
    pids: AxisControllers,
    pose: Pose,
    waypoint: Waypoint,
    cfg: ControllerConfig,
) -> ApproachStep:
    """Compute the command steering ``pose`` toward ``waypoint``.

    When the waypoint is inside the acceptance radius no PID is touched and no
    command is produced. Otherwise yaw rate and vertical speed are always
    commanded, and forward speed only once the yaw error is below
    ``cfg.yaw_alignment_threshold``.
    """
    err_x = waypoint.position.x - pose.position.x
    err_y = waypoint.position.y - pose.position.y
    distance = planar_distance(err_x, err_y)
    if distance < cfg.waypoint_radius_error:
        return ApproachStep(distance=distance, close=True)

    yaw_to_target = bearing(err_x, err_y)
    current_yaw = pose.yaw
    yaw_error = circular_difference(yaw_to_target, current_yaw)
    turn = signed_angle_difference(yaw_to_target, current_yaw)

    angular_z = pids.yaw.calculate(0.0, -turn)
    linear_z = pids.vertical.calculate(waypoint.position.z, pose.position.z)

    aligned = yaw_error < cfg.yaw_alignment_threshold
    linear_x = pids.forward.calculate(0.0, -distance) if aligned else 0.0

    command = Twist(
        linear=Vector3(x=linear_x, y=0.0, z=linear_z),
        angular=Vector3(x=0.0, y=0.0, z=angular_z),
    )
    return ApproachStep(
        distance=distance,
        close=False,
        bearing=yaw_to_target,
        yaw_error=yaw_error,
        aligned=aligned,
        command=command,
    )


@dataclass
class YawStep:
    yaw_error: float
    settled: bool
    command: Twist | None = None


def final_yaw_step(pids: AxisControllers, pose: Pose, target_yaw: float, cfg: ControllerConfig) -> YawStep:
    """Yaw-rate-only command rotating ``pose`` onto ``target_yaw``."""
    current_yaw = pose.yaw
    yaw_error = circular_difference(target_yaw, current_yaw)
    if yaw_error < cfg.final_yaw_tolerance:
        return YawStep(yaw_error=yaw_error, settled=True)
    turn = signed_angle_difference(target_yaw, current_yaw)
    command = Twist(angular=Vector3(z=pids.yaw.calculate(0.0, -turn)))
    return YawStep(yaw_error=yaw_error, settled=False, command=command)
