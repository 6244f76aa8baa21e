"""Pytest configuration and fixtures for trellis tests."""

import pytest

from trellis import Environment


@pytest.fixture
def env():
    """Create a basic trellis Environment."""
    return Environment()


@pytest.fixture
def env_with_templates():
    """Create an Environment with a few registered templates for includes."""
    env = Environment()
    env.add_template("item", "<{{ x }}>")
    env.add_template("card", "[{{ name }}]")
    env.add_template("footer", "-- {{ site.title }}")
    return env


def caret_diagnostic(lineno: int, line: str, column: int, width: int, message: str) -> str:
    """Build the expected plain caret diagnostic for a single-line span."""
    num = str(lineno)
    gutter = " " * (len(num) + 1) + " |"
    return f"\n{gutter}\n {num} | {line}\n{gutter} {' ' * column}{'^' * width} {message}\n"
