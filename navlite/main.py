from __future__ import annotations

import argparse
import json
import logging
import os
import signal
import sys
from typing import Optional

from .core.config import load_config
from .core.errors import NavliteError
from .core.types import Feedback, NavState
from .mission.plan_loader import load_plan
from .robot.api_interface import ActuationSink, FanOutSink
from .robot.uart_sink import UartTwistSink, open_serial
from .sensors.pose import LatestPose
from .server.controller_server import ControllerServer
from .sim.vehicle import SimulatedVehicle
from .utils.logging_setup import setup_logging

DEFAULT_CONFIG = os.path.join(os.path.dirname(__file__), "config", "default.yaml")
SIM_COMMAND_HISTORY = 1000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="navlite")
    sub = parser.add_subparsers(dest="cmd", required=True)
    runp = sub.add_parser("run", help="Follow a waypoint plan with the simulated vehicle")
    runp.add_argument("--plan", required=True, help="Path to a YAML or JSON waypoint plan")
    runp.add_argument("--config", type=str, default=None, help="Path to a controller config override")
    runp.add_argument(
        "--start",
        type=float,
        nargs=4,
        metavar=("X", "Y", "Z", "YAW"),
        default=(0.0, 0.0, 0.0, 0.0),
        help="Initial pose of the simulated vehicle (yaw in radians)",
    )
    runp.add_argument("--sim-rate", type=float, default=20.0, help="Simulation integration rate in Hz")
    runp.add_argument(
        "--serial-port",
        type=str,
        default=None,
        help="Also send every command as JSON lines over this UART (needs the 'serial' extra)",
    )
    runp.add_argument("--baudrate", type=int, default=115200, help="UART baud rate for --serial-port")
    runp.add_argument("--log-level", type=str, default=os.getenv("LOG_LEVEL", "INFO"))
    runp.add_argument("--no-log-file", action="store_true", help="Log to the console only")
    runp.add_argument("--log-dir", type=str, default=None, help="Directory for the rotating log file (default ./logs)")
    return parser


def run(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    try:
        cfg = load_config(args.config or DEFAULT_CONFIG)
        waypoints = load_plan(args.plan)
    except (OSError, NavliteError) as exc:
        logger.error("%s", exc)
        return 2

    x, y, z, yaw = args.start
    vehicle = SimulatedVehicle(x=x, y=y, z=z, yaw=yaw, max_commands=SIM_COMMAND_HISTORY)
    sink: ActuationSink = vehicle
    uart: Optional[UartTwistSink] = None
    if args.serial_port:
        try:
            uart = open_serial(args.serial_port, args.baudrate)
        except ImportError:
            logger.error("--serial-port needs pyserial: pip install 'navlite[serial]'")
            return 2
        except OSError as exc:
            logger.error("Cannot open %s: %s", args.serial_port, exc)
            return 2
        sink = FanOutSink(vehicle, uart)

    poses = LatestPose(max_age_s=cfg.pose_timeout_s)
    vehicle.start(rate_hz=args.sim_rate, pose_buffer=poses)
    server = ControllerServer(poses, sink, cfg)

    def on_feedback(fb: Feedback) -> None:
        logger.info("Heading for waypoint %d/%d", fb.current_waypoint + 1, len(waypoints))

    goal = server.send_goal(waypoints, feedback_callback=on_feedback)

    def handle_sigint(signum, frame):  # noqa: ARG001
        goal.cancel()

    signal.signal(signal.SIGINT, handle_sigint)
    signal.signal(signal.SIGTERM, handle_sigint)

    try:
        # Short waits keep the main thread responsive to signals.
        result = goal.result(timeout=0.2)
        while result is None:
            result = goal.result(timeout=0.2)
    finally:
        server.shutdown()
        vehicle.stop()
        if uart is not None:
            uart.close()

    final = vehicle.pose
    print(
        json.dumps(
            {
                "status": result.status.name,
                "missed_waypoints": result.missed_waypoints,
                "final_pose": {
                    "x": round(final.position.x, 3),
                    "y": round(final.position.y, 3),
                    "z": round(final.position.z, 3),
                    "yaw": round(final.yaw, 3),
                },
            }
        )
    )
    return 0 if result.status == NavState.SUCCEEDED else 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log_level, to_file=not args.no_log_file, log_dir=args.log_dir)
    except ValueError as exc:
        parser.error(str(exc))
    if args.cmd == "run":
        return run(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
