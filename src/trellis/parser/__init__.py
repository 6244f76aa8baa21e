"""Template parser: source text to an immutable syntax tree."""

from trellis.parser.core import Parser, parse

__all__ = ["Parser", "parse"]
