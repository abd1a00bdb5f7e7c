"""
Diagnostic logging for peerdep.

Every logger lives under the ``peerdep`` namespace and writes to stderr, so
log lines never interleave with the table or JSON printed on stdout. Until
:func:`setup_logging` runs, the namespace only carries a ``NullHandler``.

The CLI maps repeated ``-v`` flags onto levels:

====== =========
flags  level
====== =========
(none) WARNING
-v     INFO
-vv    DEBUG, with timestamps and logger names
====== =========
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from peerdep.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "peerdep"

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"

_lock = threading.Lock()

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def level_for_verbosity(verbose: int) -> int:
    """Return the logging level selected by ``verbose`` ``-v`` flags."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def _wants_color(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


class LevelColorFormatter(logging.Formatter):
    """Formatter that wraps the level name in an ANSI color.

    Coloring works on a copy of the record, so other handlers still see the
    plain level name.
    """

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        colored: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.colored = colored

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelname) if self.colored else None
        if color is None:
            return super().formatMessage(record)

        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{color}{record.levelname}{_RESET}"
        return super().formatMessage(tinted)


def setup_logging(verbose: int = 0, *, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Send peerdep log records at the level chosen by ``verbose`` to ``stream``.

    Calling it again replaces the previous handler.

    Args:
        verbose: Number of ``-v`` flags given on the command line.
        stream: Destination; defaults to ``sys.stderr``.

    Returns:
        The ``peerdep`` root logger.
    """
    target = stream or sys.stderr
    level = level_for_verbosity(verbose)

    handler = logging.StreamHandler(target)
    handler.setLevel(level)
    handler.setFormatter(
        LevelColorFormatter(
            LOG_VERBOSE_FORMAT if verbose >= 2 else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            colored=_wants_color(target),
        )
    )

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        root_logger.propagate = False
    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``peerdep.<name>``; names already under ``peerdep`` are kept."""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def disable_logging() -> None:
    """Return the ``peerdep`` namespace to its silent, unconfigured state."""
    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
        root_logger.propagate = True
