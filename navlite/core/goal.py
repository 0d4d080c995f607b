from __future__ import annotations

import logging
import threading
import uuid
from queue import Empty, Queue
from typing import Callable, List, Optional, Sequence, Tuple

from .types import Feedback, NavState, Result, Waypoint

log = logging.getLogger(__name__)

FeedbackCallback = Callable[[Feedback], None]


class GoalHandle:
    """Channel between the requester of a goal and the task executing it.

    The requester cancels through :meth:`cancel` and observes progress through
    :meth:`poll_feedback` (or ``feedback_callback``) and :meth:`result`. The
    executing navigator updates the status, publishes feedback and delivers
    exactly one Result.
    """

    def __init__(
        self,
        waypoints: Sequence[Waypoint],
        *,
        goal_id: Optional[str] = None,
        feedback_callback: Optional[FeedbackCallback] = None,
    ) -> None:
        self.goal_id = goal_id or uuid.uuid4().hex
        self.waypoints: Tuple[Waypoint, ...] = tuple(wp.model_copy(deep=True) for wp in waypoints)
        self.feedback_callback = feedback_callback
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._status = NavState.IDLE
        self._result: Optional[Result] = None
        self._feedback: Queue[Feedback] = Queue()
        self._history: List[Feedback] = []

    # ------------------------------------------------------------------
    # Requester side
    # ------------------------------------------------------------------
    def cancel(self) -> None:
        if self._done.is_set():
            return
        if not self._cancel.is_set():
            log.info("Received request to cancel goal %s", self.goal_id)
        self._cancel.set()

    @property
    def is_canceling(self) -> bool:
        return self._cancel.is_set()

    @property
    def status(self) -> NavState:
        with self._lock:
            return self._status

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def feedback_history(self) -> List[Feedback]:
        with self._lock:
            return list(self._history)

    def poll_feedback(self, timeout: float | None = None) -> Optional[Feedback]:
        try:
            if timeout is None or timeout <= 0:
                return self._feedback.get_nowait()
            return self._feedback.get(timeout=timeout)
        except Empty:
            return None

    def result(self, timeout: float | None = None) -> Optional[Result]:
        """Wait up to ``timeout`` seconds for the terminal Result (forever when None)."""
        if not self._done.wait(timeout):
            return None
        with self._lock:
            return self._result

    # ------------------------------------------------------------------
    # Executor side
    # ------------------------------------------------------------------
    def set_status(self, status: NavState) -> None:
        with self._lock:
            if self._status == status:
                return
            previous, self._status = self._status, status
        log.debug("Goal %s: %s -> %s", self.goal_id, previous.name, status.name)

    def publish_feedback(self, feedback: Feedback) -> None:
        with self._lock:
            self._history.append(feedback)
        self._feedback.put(feedback)
        if self.feedback_callback is not None:
            try:
                self.feedback_callback(feedback)
            except Exception:
                log.exception("Feedback callback failed for goal %s", self.goal_id)

    def finish(self, result: Result) -> None:
        if not result.status.is_terminal:
            raise ValueError(f"Result status must be terminal, got {result.status.name}")
        with self._lock:
            if self._result is not None:
                raise RuntimeError(f"Goal {self.goal_id} already finished")
            self._result = result
            self._status = result.status
        self._done.set()
