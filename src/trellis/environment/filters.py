"""Built-in filters.

A filter takes the receiver value plus any literal or variable arguments
written after the colon (``{{ items | join: ", " }}``) and returns a new
value. Filters reject bad input by raising FilterError, which the renderer
reports at the filter's position in the template.

"""

from __future__ import annotations

from collections.abc import Mapping
from html import escape as _html_escape
from typing import Any

from trellis import values
from trellis.environment.exceptions import FilterError


def _expect_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise FilterError(f"`{name}` expected string, found {values.kind(value)}")
    return value


def _expect_sequence(name: str, value: Any) -> Any:
    if isinstance(value, str) or values.is_list(value):
        return value
    raise FilterError(f"`{name}` expected list or string, found {values.kind(value)}")


def _filter_upper(value: Any) -> str:
    return _expect_string("upper", value).upper()


def _filter_lower(value: Any) -> str:
    return _expect_string("lower", value).lower()


def _filter_trim(value: Any) -> str:
    return _expect_string("trim", value).strip()


def _filter_length(value: Any) -> int:
    if isinstance(value, Mapping):
        return len(value)
    return len(_expect_sequence("length", value))


def _filter_first(value: Any) -> Any:
    seq = _expect_sequence("first", value)
    return seq[0] if seq else None


def _filter_last(value: Any) -> Any:
    seq = _expect_sequence("last", value)
    return seq[-1] if seq else None


def _filter_reverse(value: Any) -> Any:
    seq = _expect_sequence("reverse", value)
    if isinstance(seq, str):
        return seq[::-1]
    return list(reversed(seq))


def _filter_join(value: Any, separator: Any = "") -> str:
    if not values.is_list(value):
        raise FilterError(f"`join` expected list, found {values.kind(value)}")
    separator = _expect_string("join", separator)
    parts = []
    for item in value:
        text = values.format_scalar(item)
        if text is None:
            raise FilterError(f"`join` cannot join {values.kind(item)} items")
        parts.append(text)
    return separator.join(parts)


def _filter_escape(value: Any) -> str:
    text = values.format_scalar(value)
    if text is None:
        raise FilterError(f"`escape` expected renderable value, found {values.kind(value)}")
    return _html_escape(text, quote=True)


DEFAULT_FILTERS = {
    "upper": _filter_upper,
    "lower": _filter_lower,
    "trim": _filter_trim,
    "length": _filter_length,
    "first": _filter_first,
    "last": _filter_last,
    "reverse": _filter_reverse,
    "join": _filter_join,
    "escape": _filter_escape,
}
