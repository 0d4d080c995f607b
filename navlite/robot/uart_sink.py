from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from ..core.types import Twist

log = logging.getLogger(__name__)


class ByteWriter(Protocol):
    """Minimal protocol for a byte-oriented writer (e.g., pyserial Serial)."""

    def write(self, data: bytes) -> int: ...
    def flush(self) -> None: ...


@dataclass
class UartTwistSink:
    """
    Actuation sink writing twist commands as JSON lines to a byte writer.

    Frames look like:
        {"cmd":"twist","linear":[0.25,0.0,0.0],"angular":[0.0,0.0,0.1]}\\n

    A failed write is logged and dropped; the control loop publishes again on
    the next tick.
    """

    writer: ByteWriter

    def publish(self, twist: Twist) -> None:
        self._send("twist", {"linear": twist.linear.as_list(), "angular": twist.angular.as_list()})

    def _send(self, cmd: str, payload: dict) -> None:
        msg = {"cmd": cmd}
        msg.update(payload)
        data = (json.dumps(msg, separators=(",", ":")) + "\n").encode("utf-8")
        try:
            self.writer.write(data)
            self.writer.flush()
        except (OSError, ValueError) as e:
            log.warning("UART send failed: %s", e)

    def close(self) -> None:
        """Close the underlying writer when it supports closing."""
        close = getattr(self.writer, "close", None)
        if close is not None:
            close()


def open_serial(port: str, baudrate: int = 115200, timeout_s: float = 0.2) -> UartTwistSink:
    """Open ``port`` with pyserial and wrap it in a UartTwistSink."""
    import serial  # pyserial, installed with the "serial" extra

    ser = serial.Serial(port, baudrate, timeout=timeout_s)
    log.info("UART opened on %s @ %d bps", port, baudrate)
    return UartTwistSink(writer=ser)


__all__ = ["UartTwistSink", "ByteWriter", "open_serial"]
