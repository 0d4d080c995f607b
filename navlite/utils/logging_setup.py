from __future__ import annotations

import logging
import logging.handlers
import os
from typing import Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Marks handlers installed here so a later call only replaces its own.
_OWNED = "_navlite_owned"


def setup_logging(
    level: str = "INFO",
    to_file: bool = True,
    log_dir: Optional[str] = None,
    filename: str = "navlite.log",
) -> logging.Logger:
    """Configure root logger with console and optional RotatingFileHandler.

    Calling it again swaps out the handlers of the previous call and leaves
    handlers attached by anything else (an embedding application, pytest's
    capture) in place. The thread name is part of every record since goals
    run on their own worker threads.

    Args:
        level: Log level name, one of ``LEVELS`` (any case).
        to_file: If True, write logs to ``log_dir/filename`` with rotation.
        log_dir: Directory for log files; defaults to ./logs.
        filename: Name of the rotating log file.

    Raises:
        ValueError: if ``level`` is not a known level name.
    """
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"unknown log level {level!r}, expected one of {', '.join(LEVELS)}")
    lvl = getattr(logging, name)
    logger = logging.getLogger()
    logger.setLevel(lvl)

    for h in list(logger.handlers):
        if getattr(h, _OWNED, False):
            logger.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(threadName)s %(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if to_file:
        log_dir = log_dir or os.path.join(os.getcwd(), "logs")
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, filename), maxBytes=2 * 1024 * 1024, backupCount=3
            )
        )
    for h in handlers:
        h.setLevel(lvl)
        h.setFormatter(fmt)
        setattr(h, _OWNED, True)
        logger.addHandler(h)
    return logger
