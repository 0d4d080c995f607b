from __future__ import annotations

import logging
import threading
from typing import Optional

log = logging.getLogger(__name__)


class Permit:
    """Exclusive right to command the vehicle.

    Only :meth:`GoalArbiter.try_acquire` hands these out. Releasing is
    idempotent: the underlying lock is freed by the first :meth:`release` and
    later calls do nothing, so one permit can never release a lock acquired by
    another holder.
    """

    def __init__(self, lock: threading.Lock, owner: str) -> None:
        self._lock = lock
        self._state_lock = threading.Lock()
        self._released = False
        self.owner = owner

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        with self._state_lock:
            if self._released:
                return
            self._released = True
            self._lock.release()
        log.debug("Permit released by %s", self.owner)

    def __enter__(self) -> "Permit":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class GoalArbiter:
    """Non-blocking exclusivity gate over vehicle commanding.

    A request that cannot acquire the permit is refused immediately: there is
    no queue and no waiting.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def held(self) -> bool:
        return self._lock.locked()

    def try_acquire(self, owner: str = "anonymous") -> Optional[Permit]:
        if not self._lock.acquire(blocking=False):
            log.debug("Permit unavailable for %s", owner)
            return None
        log.debug("Permit acquired by %s", owner)
        return Permit(self._lock, owner)
