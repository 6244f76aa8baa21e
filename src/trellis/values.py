"""Runtime value helpers.

Template data is plain Python: ``None``, ``bool``, ``int``, ``float``,
``str``, sequences (``list``/``tuple``) and mappings. This module names
those kinds for error messages and turns renderable scalars into text.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

NONE = "none"
BOOL = "bool"
INTEGER = "integer"
FLOAT = "float"
STRING = "string"
LIST = "list"
MAP = "map"


def kind(value: Any) -> str:
    """Return the kind name of ``value`` as used in error messages.

    Objects outside the value model are reported by their Python type name.

    Example:
        >>> kind(True), kind(3), kind([1]), kind({"a": 1})
        ('bool', 'integer', 'list', 'map')
    """
    # bool must be tested before int
    if value is None:
        return NONE
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, float):
        return FLOAT
    if isinstance(value, str):
        return STRING
    if isinstance(value, list | tuple):
        return LIST
    if isinstance(value, Mapping):
        return MAP
    return type(value).__name__


def is_list(value: Any) -> bool:
    return isinstance(value, list | tuple)


def is_map(value: Any) -> bool:
    return isinstance(value, Mapping)


def format_scalar(value: Any) -> str | None:
    """Render a scalar to text, or return ``None`` if it is not renderable.

    ``None`` renders as the empty string and booleans as ``true``/``false``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return value
    return None


def format_float(value: float) -> str:
    """Shortest round-trip digits in positional notation, never an exponent.

    Whole numbers drop the fractional part: ``1.0`` renders as ``1`` and
    ``1e16`` as ``10000000000000000``. ``inf`` and ``nan`` keep their
    ``repr``.

    Example:
        >>> format_float(1e-7), format_float(2.5), format_float(1.0)
        ('0.0000001', '2.5', '1')
    """
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
