from __future__ import annotations

from typing import Protocol

from ..core.types import Twist


class ActuationSink(Protocol):
    """Receives one motion command per control tick."""

    def publish(self, twist: Twist) -> None: ...


class FanOutSink:
    """Publishes every command to each of ``sinks`` in order."""

    def __init__(self, *sinks: ActuationSink) -> None:
        self.sinks = sinks

    def publish(self, twist: Twist) -> None:
        for sink in self.sinks:
            sink.publish(twist)
