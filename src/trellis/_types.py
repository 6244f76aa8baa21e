"""Core value types shared by the lexer, parser, and renderer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open ``[start, end)`` offset range into the template source.

    Offsets index the source ``str`` (code points, not bytes). Every syntax
    node that can be blamed for a runtime error carries one, so diagnostics
    can underline the exact offending text.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")

    def __len__(self) -> int:
        return self.end - self.start

    def combine(self, other: Span) -> Span:
        """Smallest span covering both ``self`` and ``other``."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def slice(self, source: str) -> str:
        return source[self.start : self.end]


class TokenType(Enum):
    """Token types produced by the lexer."""

    RAW = "raw"
    BEGIN_EXPR = "begin_expr"
    END_EXPR = "end_expr"
    BEGIN_BLOCK = "begin_block"
    END_BLOCK = "end_block"
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    DOT = "dot"
    PIPE = "pipe"
    COLON = "colon"
    COMMA = "comma"
    EOF = "eof"

    def describe(self) -> str:
        """Human-readable token description for parser messages."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    TokenType.RAW: "raw template",
    TokenType.BEGIN_EXPR: "begin expression",
    TokenType.END_EXPR: "end expression",
    TokenType.BEGIN_BLOCK: "begin block",
    TokenType.END_BLOCK: "end block",
    TokenType.IDENT: "identifier",
    TokenType.STRING: "string",
    TokenType.NUMBER: "number",
    TokenType.DOT: "member access operator",
    TokenType.PIPE: "pipe",
    TokenType.COLON: "colon",
    TokenType.COMMA: "comma",
    TokenType.EOF: "end of template",
}


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token.

    ``value`` holds the token text for identifiers and numbers, the decoded
    text for strings, and the (possibly whitespace-trimmed) text for raw
    template segments. ``span`` always points at the token in the source.
    """

    type: TokenType
    span: Span
    value: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.span.start}:{self.span.end})"
