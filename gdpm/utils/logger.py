"""
Logging utilities for gdpm.

gdpm is a library layer: every module logs through :func:`get_logger` and
nothing is emitted until an embedding application opts in through
:func:`setup_logging`. Handlers are never duplicated, so configuration may
be repeated safely (e.g. once per test).
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from gdpm.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "gdpm"

_lock = threading.Lock()


class LevelColorFormatter(logging.Formatter):
    """Formatter that paints the level name with ANSI colors on a TTY."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.stream = stream

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None or not colors_enabled(self.stream):
            return super().format(record)

        # Other handlers must keep seeing the plain level name
        painted = logging.makeLogRecord(record.__dict__)
        painted.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(painted)


def colors_enabled(stream: Optional[IO[str]] = None) -> bool:
    """Return True when ANSI colors may be written to ``stream``.

    ``NO_COLOR`` and ``CI`` always disable colors.
    """
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    target = stream if stream is not None else sys.stderr
    try:
        return bool(target.isatty())
    except (AttributeError, OSError, ValueError):
        return False


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` style counter to a logging level.

    0 is WARNING, 1 is INFO and anything higher is DEBUG.
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbosity: int = 0,
    *,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Attach a single stream handler to the ``gdpm`` logger.

    Args:
        verbosity: Verbosity counter, see :func:`level_for_verbosity`.
            Timestamps and logger names are added at DEBUG level.
        stream: Output stream; defaults to ``sys.stderr``.

    Returns:
        The configured ``gdpm`` root logger.
    """
    level = level_for_verbosity(verbosity)
    fmt = LOG_VERBOSE_FORMAT if level <= logging.DEBUG else LOG_DEFAULT_FORMAT

    with _lock:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(
            LevelColorFormatter(fmt, datefmt=LOG_DATE_FORMAT, stream=stream)
        )
        root.addHandler(handler)
        root.setLevel(level)
        root.propagate = False

    root.debug("Logging initialized at %s level", logging.getLevelName(level))
    return root


def disable_logging() -> None:
    """Detach every gdpm handler and fall back to a NullHandler."""
    with _lock:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.NOTSET)
        root.propagate = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the gdpm namespace.

    Args:
        name: Logger name, either relative (``"core.walker"``) or already
            prefixed (``"gdpm.core.walker"``, i.e. ``__name__``).

    Returns:
        A logger instance under the ``gdpm`` hierarchy.
    """
    if not name or name == ROOT_LOGGER_NAME:
        qualified = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        qualified = name
    else:
        qualified = f"{ROOT_LOGGER_NAME}.{name}"

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return logging.getLogger(qualified)
