"""Terminal colors for the log output and the `validate` report.

Colors are off when NO_COLOR is set or the stream is not a TTY, unless
FORCE_COLOR is set.
"""

import os
import sys
from typing import TextIO

__all__ = [
    "BOLD",
    "DIM",
    "GREEN",
    "RED",
    "RESET",
    "YELLOW",
    "LogStyles",
    "ReportStyles",
    "colorize",
    "make_style",
    "should_colorize",
]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
GREEN = "32"
YELLOW = "33"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell if ANSI colors should be written to `stream` (stderr by default)."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def make_style(*codes: str) -> tuple[str, str]:
    """Return the (prefix, suffix) pair wrapping a text in `codes`."""
    if not codes:
        return ("", RESET)
    return (f"{_ESC}{';'.join(codes)}m", RESET)


def colorize(text: str, *codes: str, stream: TextIO | None = None) -> str:
    """Wrap `text` in ANSI codes, if `stream` supports colors.

    Eg: colorize("ERROR", RED, BOLD) → "\\x1b[31;1mERROR\\x1b[0m"
    """
    if not codes or not should_colorize(stream):
        return text
    prefix, suffix = make_style(*codes)
    return f"{prefix}{text}{suffix}"


class LogStyles:
    """Styles of the log levels."""

    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)


class ReportStyles:
    """Styles of the `validate` report lines."""

    ERROR = (RED, BOLD)
    WARNING = (YELLOW,)
    VALID = (GREEN,)
