from __future__ import annotations


class NavliteError(Exception):
    """Base class for navlite errors."""


class GoalRejectedError(NavliteError):
    """Another goal holds the vehicle; the request was refused without side effects."""


class PlanFormatError(NavliteError, ValueError):
    """A waypoint plan file could not be parsed."""


class ConfigError(NavliteError, ValueError):
    """Controller configuration failed validation."""
