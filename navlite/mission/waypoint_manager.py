from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..core.types import Waypoint


class WaypointManager:
    """Progress cursor over one goal's immutable waypoint sequence."""

    def __init__(self, waypoints: Sequence[Waypoint]):
        self._wps: Tuple[Waypoint, ...] = tuple(wp.model_copy(deep=True) for wp in waypoints)
        self._idx = 0

    def __len__(self) -> int:
        return len(self._wps)

    @property
    def index(self) -> int:
        return self._idx

    def current(self) -> Optional[Waypoint]:
        return self._wps[self._idx] if self._idx < len(self._wps) else None

    def last(self) -> Optional[Waypoint]:
        return self._wps[-1] if self._wps else None

    def advance(self) -> Optional[int]:
        """Move past the current waypoint. Returns the new index, or None when exhausted."""
        if self._idx < len(self._wps):
            self._idx += 1
        return self._idx if self._idx < len(self._wps) else None

    def missed(self) -> List[int]:
        """Indices of the waypoints not yet reached, in ascending order."""
        return list(range(self._idx, len(self._wps)))
