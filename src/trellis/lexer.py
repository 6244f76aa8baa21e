"""Lexer for trellis templates.

Splits template source into a flat token stream:

    RAW text | BEGIN_EXPR ... END_EXPR | BEGIN_BLOCK ... END_BLOCK

Comments (``{# ... #}``) are dropped. A ``-`` directly inside a delimiter
(``{{-``, ``-}}``, ``{%-``, ``-%}``, ``{#-``, ``-#}``) trims whitespace from
the neighbouring raw text.

Every token carries the Span of its text in the source so that both syntax
errors and later render errors can point at it.

"""

from __future__ import annotations

import re

from trellis._types import Span, Token, TokenType
from trellis.environment.exceptions import ErrorCode, TemplateSyntaxError

_DELIMITER_RE = re.compile(r"\{\{|\{%|\{#|\}\}|%\}|#\}")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SEGMENT_RE = re.compile(r"[A-Za-z0-9_]+")
_NUMBER_RE = re.compile(r"[-+]?[0-9]+(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")

_BEGIN = {"{{": TokenType.BEGIN_EXPR, "{%": TokenType.BEGIN_BLOCK}
_END = {"}}": TokenType.END_EXPR, "%}": TokenType.END_BLOCK}
_CLOSER = {"{{": "}}", "{%": "%}", "{#": "#}"}
_END_DELIMITERS = frozenset(("}}", "%}", "#}"))
_BEGIN_DELIMITERS = frozenset(("{{", "{%", "{#"))

_PUNCTUATION = {
    ".": TokenType.DOT,
    "|": TokenType.PIPE,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}


class Lexer:
    """Tokenize a template source string.

    Example:
        >>> [t.type.name for t in Lexer("Hi {{ name }}").tokenize()]
        ['RAW', 'BEGIN_EXPR', 'IDENT', 'END_EXPR', 'EOF']

    """

    def __init__(self, source: str, name: str | None = None):
        self._source = source
        self._name = name
        self._pos = 0
        self._tokens: list[Token] = []
        self._trim_next = False

    def tokenize(self) -> list[Token]:
        source = self._source
        while self._pos < len(source):
            match = _DELIMITER_RE.search(source, self._pos)
            if match is None:
                self._emit_raw(self._pos, len(source), trim_right=False)
                break

            delimiter = match.group()
            if delimiter in _END_DELIMITERS:
                raise self._error(
                    "unexpected end tag",
                    Span(match.start(), match.end()),
                    ErrorCode.UNEXPECTED_END_TAG,
                )

            trim_left = source.startswith("-", match.end())
            self._emit_raw(self._pos, match.start(), trim_right=trim_left)

            begin = Span(match.start(), match.end())
            body_start = match.end() + 1 if trim_left else match.end()
            if delimiter == "{#":
                self._skip_comment(begin, body_start)
            else:
                self._tokens.append(Token(_BEGIN[delimiter], begin, delimiter))
                self._lex_tag(delimiter, begin, body_start)

        end = len(source)
        self._tokens.append(Token(TokenType.EOF, Span(end, end)))
        return self._tokens

    def _emit_raw(self, start: int, end: int, *, trim_right: bool) -> None:
        text = self._source[start:end]
        if self._trim_next:
            text = text.lstrip()
            self._trim_next = False
        if trim_right:
            text = text.rstrip()
        if text:
            self._tokens.append(Token(TokenType.RAW, Span(start, end), text))

    def _skip_comment(self, begin: Span, body_start: int) -> None:
        close = self._source.find("#}", body_start)
        if close == -1:
            raise self._error("unclosed begin tag", begin, ErrorCode.UNCLOSED_BEGIN_TAG)
        self._trim_next = close > body_start and self._source[close - 1] == "-"
        self._pos = close + 2

    def _lex_tag(self, opener: str, begin: Span, pos: int) -> None:
        """Lex the inside of an expression or block tag, up to its end delimiter."""
        source = self._source
        closer = _CLOSER[opener]

        while True:
            if pos >= len(source):
                raise self._error("unclosed begin tag", begin, ErrorCode.UNCLOSED_BEGIN_TAG)

            char = source[pos]
            if char.isspace():
                pos += 1
                continue

            trim = char == "-" and source[pos + 1 : pos + 3] in _END_DELIMITERS
            at = pos + 1 if trim else pos
            pair = source[at : at + 2]

            if pair in _END_DELIMITERS:
                span = Span(at, at + 2)
                if pair != closer:
                    raise self._error("unexpected end tag", span, ErrorCode.UNEXPECTED_END_TAG)
                self._tokens.append(Token(_END[pair], span, pair))
                self._trim_next = trim
                self._pos = at + 2
                return

            if pair in _BEGIN_DELIMITERS:
                raise self._error("unclosed begin tag", begin, ErrorCode.UNCLOSED_BEGIN_TAG)

            if char == '"':
                pos = self._lex_string(pos)
                continue

            if char in _PUNCTUATION:
                self._tokens.append(Token(_PUNCTUATION[char], Span(pos, pos + 1), char))
                pos += 1
                continue

            # Path segments after a dot may be numeric list indexes
            after_dot = bool(self._tokens) and self._tokens[-1].type is TokenType.DOT
            match = (_SEGMENT_RE if after_dot else _IDENT_RE).match(source, pos)
            if match:
                self._tokens.append(
                    Token(TokenType.IDENT, Span(pos, match.end()), match.group())
                )
                pos = match.end()
                continue

            match = _NUMBER_RE.match(source, pos)
            if match:
                self._tokens.append(
                    Token(TokenType.NUMBER, Span(pos, match.end()), match.group())
                )
                pos = match.end()
                continue

            raise self._error(
                "unexpected character",
                Span(pos, pos + 1),
                ErrorCode.UNEXPECTED_CHARACTER,
            )

    def _lex_string(self, start: int) -> int:
        source = self._source
        chars: list[str] = []
        pos = start + 1
        while True:
            if pos >= len(source):
                raise self._error(
                    "undelimited string",
                    Span(start, len(source)),
                    ErrorCode.UNDELIMITED_STRING,
                )
            char = source[pos]
            if char == '"':
                pos += 1
                break
            if char == "\\":
                escaped = _ESCAPES.get(source[pos + 1 : pos + 2])
                if escaped is None:
                    raise self._error(
                        "unknown escape character",
                        Span(pos, min(pos + 2, len(source))),
                        ErrorCode.UNEXPECTED_CHARACTER,
                    )
                chars.append(escaped)
                pos += 2
                continue
            chars.append(char)
            pos += 1

        self._tokens.append(Token(TokenType.STRING, Span(start, pos), "".join(chars)))
        return pos

    def _error(self, message: str, span: Span, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message, source=self._source, span=span, name=self._name, code=code
        )


def tokenize(source: str, name: str | None = None) -> list[Token]:
    """Tokenize ``source``; raises TemplateSyntaxError on malformed tags."""
    return Lexer(source, name).tokenize()
