"""Logging setup.

Loggers are created with `get_logger` and share the handlers installed by
`init_logger`. Debug mode (set by `--debug` or the HYPRSPACES_DEBUG
environment variable) lowers the level to DEBUG and adds the source
location to every line.
"""

import logging
import os

from .ansi import LogStyles, make_style, should_colorize

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
]

FILE_FORMAT = r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"
DEBUG_FORMAT = r"%(name)20s - %(message)s // %(filename)s:%(lineno)d"


class LogObjects:
    """Handlers shared by every logger, and the debug flag."""

    handlers: list[logging.Handler] = []
    debug: bool = bool(os.environ.get("HYPRSPACES_DEBUG"))


def is_debug() -> bool:
    """Tell if debug logging is enabled."""
    return LogObjects.debug


class ScreenLogFormatter(logging.Formatter):
    """Formats the stderr lines, colored by level."""

    def __init__(self, debug: bool = False) -> None:
        super().__init__()
        fmt = DEBUG_FORMAT if debug else r"%(message)s"
        colors = should_colorize()
        self._formatters: dict[int, logging.Formatter] = {}
        for level, style in (
            (logging.DEBUG, ()),
            (logging.INFO, ()),
            (logging.WARNING, LogStyles.WARNING),
            (logging.ERROR, LogStyles.ERROR),
            (logging.CRITICAL, LogStyles.CRITICAL),
        ):
            prefix, suffix = make_style(*style) if colors and style else ("", "")
            self._formatters[level] = logging.Formatter(prefix + fmt + suffix)

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        return formatter.format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Install the shared handlers.

    Args:
        filename: Also log to this file (with timestamps)
        force_debug: Enable debug logging
    """
    if force_debug:
        LogObjects.debug = True

    logging.basicConfig()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter(is_debug()))
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "hyprspaces", level: int | None = None) -> logging.Logger:
    """Return a named logger using the shared handlers.

    Args:
        name: logger's name
        level: logger's level (DEBUG in debug mode, WARNING otherwise, if not set)
    """
    logger = logging.getLogger(name)
    if level is None:
        level = logging.DEBUG if is_debug() else logging.WARNING
    logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
