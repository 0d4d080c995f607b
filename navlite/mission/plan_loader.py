from __future__ import annotations

import json
import math
from typing import Any, List

import yaml
from pydantic import ValidationError

from ..core.errors import PlanFormatError
from ..core.types import Waypoint


def load_plan(path: str) -> List[Waypoint]:
    """Parse a waypoint plan file (.json, or YAML for anything else).

    The document is either a list of waypoints or a mapping with a
    ``waypoints`` list. Each waypoint is given in one of two forms:

        {"x": 5.0, "y": 0.0, "z": 1.0, "yaw": 1.57}       # yaw in radians
        {"x": 5.0, "y": 0.0, "yaw_deg": 90}               # or in degrees
        {"position": {...}, "orientation": {"x":..,"y":..,"z":..,"w":..}}

    Missing z and yaw default to 0.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f) if path.endswith(".json") else yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise PlanFormatError(f"{path}: {exc}") from exc
    return parse_plan(data, source=path)


def parse_plan(data: Any, source: str = "<plan>") -> List[Waypoint]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("waypoints", [])
    if not isinstance(data, list):
        raise PlanFormatError(f"{source}: expected a list of waypoints")

    wps: List[Waypoint] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise PlanFormatError(f"{source}: waypoint {idx} is not a mapping")
        try:
            wps.append(_parse_waypoint(item))
        except (ValidationError, TypeError, ValueError) as exc:
            raise PlanFormatError(f"{source}: waypoint {idx} is invalid: {exc}") from exc
    return wps


def _parse_waypoint(item: dict) -> Waypoint:
    if "position" in item:
        return Waypoint.model_validate(item)
    if "x" not in item or "y" not in item:
        raise ValueError("needs x and y")
    yaw = item.get("yaw")
    if yaw is None and item.get("yaw_deg") is not None:
        yaw = math.radians(float(item["yaw_deg"]))
    return Waypoint.from_xyz_yaw(
        float(item["x"]),
        float(item["y"]),
        float(item.get("z", 0.0) or 0.0),
        float(yaw or 0.0),
    )
