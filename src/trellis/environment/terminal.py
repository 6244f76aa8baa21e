"""ANSI styling for diagnostics printed to a terminal.

Styling is decided once at import: ``FORCE_COLOR`` turns it on,
``NO_COLOR`` (https://no-color.org/) turns it off, otherwise it follows
whether stdout is a TTY. Every helper returns its input untouched when
styling is off, so callers never branch on it.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

StyleName = Literal["reset", "bold", "dim", "red", "yellow", "cyan", "bright_red"]

_STYLES: dict[str, str] = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    return _USE_COLORS


def colorize(text: str, *styles: StyleName) -> str:
    """Wrap ``text`` in the escape codes for ``styles``, then a reset.

    Example:
        >>> colorize("oops", "red", "bold")  # with styling on
        '\\x1b[31m\\x1b[1moops\\x1b[0m'
    """
    if not _USE_COLORS:
        return text
    prefix = "".join(_STYLES.get(style, "") for style in styles)
    return f"{prefix}{text}{_STYLES['reset']}" if prefix else text


def strip_colors(text: str) -> str:
    """Drop every ANSI escape sequence from ``text``."""
    return _ANSI_ESCAPE.sub("", text)


# Roles used by the caret diagnostic


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def line_number(text: str) -> str:
    return colorize(text, "yellow")


def error_line(text: str) -> str:
    """Style the carets and message under the offending text."""
    return colorize(text, "bright_red")


def dim_text(text: str) -> str:
    """Style the ``|`` gutter."""
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """First line of a compact diagnostic: ``T-RUN-001: not found in map``."""
    if code:
        return f"{error_code(code)}: {message}"
    return message
