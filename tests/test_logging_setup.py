from __future__ import annotations

import logging
import os

import pytest

from navlite.utils.logging_setup import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    yield root
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(saved_level)


def test_repeated_setup_replaces_only_own_handlers(root_logger):
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)

    setup_logging("debug", to_file=False)
    setup_logging("warning", to_file=False)

    assert foreign in root_logger.handlers
    own = [h for h in root_logger.handlers if h is not foreign and isinstance(h, logging.StreamHandler)]
    own = [h for h in own if getattr(h, "_navlite_owned", False)]
    assert len(own) == 1
    assert root_logger.level == logging.WARNING


def test_rotating_file_records_thread_name(root_logger, tmp_path):
    setup_logging("INFO", to_file=True, log_dir=str(tmp_path), filename="run.log")
    logging.getLogger("navlite.test").info("hello %s", "file")
    for h in root_logger.handlers:
        h.flush()

    text = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "[MainThread navlite.test] hello file" in text
    assert os.path.getsize(tmp_path / "run.log") > 0


def test_unknown_level_rejected(root_logger):
    with pytest.raises(ValueError):
        setup_logging("LOUD", to_file=False)
