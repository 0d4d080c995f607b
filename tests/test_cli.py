from __future__ import annotations

import json
import logging
import signal
import tempfile

import pytest

from navlite.main import main


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(saved_level)


def write_tmp(text: str, suffix: str) -> str:
    f = tempfile.NamedTemporaryFile("w", suffix=suffix, delete=False)
    f.write(text)
    f.close()
    return f.name


@pytest.mark.integration
def test_run_plan_with_simulated_vehicle(capsys):
    plan = write_tmp("waypoints:\n  - {x: 0.5, y: 0.0, yaw_deg: 10}\n", ".yaml")
    cfg = write_tmp(
        "controller_server:\n  tick_period_s: 0.02\n  max_speed_xy: 1.0\n  final_yaw_tolerance: 0.05\n",
        ".yaml",
    )

    code = main(["run", "--plan", plan, "--config", cfg, "--no-log-file", "--sim-rate", "200"])

    out = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert code == 0
    assert out["status"] == "SUCCEEDED"
    assert out["missed_waypoints"] == []


def test_missing_plan_file_returns_error_code():
    assert main(["run", "--plan", "/nonexistent/plan.yaml", "--no-log-file"]) == 2


def test_malformed_config_returns_error_code():
    plan = write_tmp("- {x: 1.0, y: 0.0}\n", ".yaml")
    cfg = write_tmp("controller_server: [unclosed\n", ".yaml")
    assert main(["run", "--plan", plan, "--config", cfg, "--no-log-file"]) == 2


def test_unknown_log_level_is_a_usage_error():
    plan = write_tmp("- {x: 1.0, y: 0.0}\n", ".yaml")
    with pytest.raises(SystemExit) as exc:
        main(["run", "--plan", plan, "--no-log-file", "--log-level", "LOUD"])
    assert exc.value.code == 2


class RecordingPort:
    opened: list = []

    def __init__(self, port: str, baudrate: int, timeout: float) -> None:
        self.port = port
        self.baudrate = baudrate
        self.lines: list[bytes] = []
        self.closed = False
        RecordingPort.opened.append(self)

    def write(self, data: bytes) -> int:
        self.lines.append(data)
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.mark.integration
def test_run_mirrors_commands_to_serial_port(capsys, monkeypatch):
    serial = pytest.importorskip("serial")
    RecordingPort.opened = []
    monkeypatch.setattr(serial, "Serial", RecordingPort)
    plan = write_tmp("- {x: 0.5, y: 0.0}\n", ".yaml")
    cfg = write_tmp("controller_server:\n  tick_period_s: 0.02\n  max_speed_xy: 1.0\n", ".yaml")

    code = main(
        ["run", "--plan", plan, "--config", cfg, "--no-log-file", "--sim-rate", "200",
         "--serial-port", "/dev/ttyACM0", "--baudrate", "57600"]
    )

    assert code == 0
    (port,) = RecordingPort.opened
    assert (port.port, port.baudrate) == ("/dev/ttyACM0", 57600)
    frames = [json.loads(line) for line in port.lines]
    assert frames[0]["cmd"] == "twist" and frames[0]["linear"][0] > 0
    assert frames[-2:] == [{"cmd": "twist", "linear": [0.0, 0.0, 0.0], "angular": [0.0, 0.0, 0.0]}] * 2
    assert port.closed
    assert json.loads(capsys.readouterr().out.strip().splitlines()[-1])["status"] == "SUCCEEDED"


def test_unopenable_serial_port_returns_error_code(monkeypatch):
    serial = pytest.importorskip("serial")

    def refuse(port, baudrate, timeout):
        raise serial.SerialException(f"could not open port {port}")

    monkeypatch.setattr(serial, "Serial", refuse)
    plan = write_tmp("- {x: 1.0, y: 0.0}\n", ".yaml")
    assert main(["run", "--plan", plan, "--no-log-file", "--serial-port", "/dev/nope"]) == 2
