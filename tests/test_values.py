"""Tests for value kind names and scalar formatting."""

from __future__ import annotations

from collections import OrderedDict

import pytest

from trellis import values


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, "none"),
        (True, "bool"),
        (0, "integer"),
        (0.0, "float"),
        ("", "string"),
        ([], "list"),
        ((1,), "list"),
        ({}, "map"),
        (OrderedDict(), "map"),
        (b"x", "bytes"),
    ],
)
def test_kind(value: object, kind: str) -> None:
    assert values.kind(value) == kind


def test_bool_is_not_integer() -> None:
    assert values.format_scalar(True) == "true"
    assert values.format_scalar(1) == "1"


def test_containers_are_not_renderable() -> None:
    assert values.format_scalar([1]) is None
    assert values.format_scalar({"a": 1}) is None


def test_float_uses_positional_notation() -> None:
    assert values.format_scalar(0.1) == "0.1"
    assert values.format_scalar(1e-7) == "0.0000001"
    assert values.format_scalar(1e16) == "10000000000000000"
    assert values.format_scalar(1e100) == "1" + "0" * 100
    assert values.format_scalar(1.0) == "1"
    assert values.format_scalar(-2.50) == "-2.5"


def test_non_finite_floats_keep_repr() -> None:
    assert values.format_scalar(float("inf")) == "inf"
    assert values.format_scalar(float("-inf")) == "-inf"
    assert values.format_scalar(float("nan")) == "nan"
