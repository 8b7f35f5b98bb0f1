"""Logging setup.

The terminal belongs to the TUI, so records only ever go to a file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
DEFAULT_LOG_FILE = Path(user_log_dir("gv", appauthor=False)) / "gv.log"


def level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> Path | None:
    """Attach a file handler to the ``gv`` logger and return its path.

    Without ``log_file`` and verbosity a ``NullHandler`` is installed instead
    and ``None`` is returned.
    """
    logger = logging.getLogger("gv")
    logger.setLevel(level_for_verbosity(verbosity))
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is None and verbosity <= 0:
        logger.addHandler(logging.NullHandler())
        return None

    target = log_file if log_file is not None else DEFAULT_LOG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return target
