from __future__ import annotations

from typing import Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, ValidationError

from .errors import ConfigError

DEFAULT_MAX_SPEED_XY = 0.25  # m/s
DEFAULT_MAX_SPEED_Z = 0.33  # m/s
DEFAULT_MAX_YAW_SPEED = 50.0
DEFAULT_WAYPOINT_RADIUS_ERROR = 0.3  # m

PidGains = Tuple[float, float, float]


class ControllerConfig(BaseModel):
    """Tuning of the waypoint controller. Units are metres, seconds and radians."""

    model_config = ConfigDict(allow_inf_nan=False)

    max_speed_xy: float = Field(DEFAULT_MAX_SPEED_XY, gt=0)
    max_speed_z: float = Field(DEFAULT_MAX_SPEED_Z, gt=0)
    max_yaw_speed: float = Field(DEFAULT_MAX_YAW_SPEED, gt=0)
    waypoint_radius_error: float = Field(DEFAULT_WAYPOINT_RADIUS_ERROR, gt=0)
    pid_xy: PidGains = (0.7, 0.0, 0.0)
    pid_z: PidGains = (0.7, 0.0, 0.0)
    pid_yaw: PidGains = (0.7, 0.0, 0.0)

    tick_period_s: float = Field(0.5, gt=0)
    yaw_alignment_threshold: float = Field(0.087, gt=0)  # ~5 degrees
    final_yaw_tolerance: float = Field(0.02, gt=0)
    stop_repeats: int = Field(2, ge=2)
    waypoint_timeout_s: Optional[PositiveFloat] = None
    pose_timeout_s: float = Field(1.0, gt=0)


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Optional[str] = None, section: str = "controller_server") -> ControllerConfig:
    """Load a ControllerConfig from the ``section`` mapping of a YAML file.

    Without a path the defaults are returned. Unknown keys are ignored.
    """
    if path is None:
        return ControllerConfig()
    try:
        data = load_yaml(path)
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: unreadable configuration: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    raw = data.get(section, {}) or {}
    try:
        return ControllerConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{path}: invalid {section} configuration: {exc}") from exc
