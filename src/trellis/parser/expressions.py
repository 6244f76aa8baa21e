"""Expression parsing for the trellis parser.

Provides mixin for parsing filter chains, variable paths and literals.
"""

from __future__ import annotations

from trellis._types import Token, TokenType
from trellis.environment.exceptions import ErrorCode
from trellis.nodes import Call, Expr, Ident, Literal, Var

_KEYWORD_LITERALS = {"true": True, "false": False, "none": None}


class ExpressionParsingMixin:
    """Mixin for parsing expressions.

    Required Host Attributes:
        - _current: property
        - _advance: method
        - _expect: method
        - _error: method
    """

    def _parse_expr(self) -> Expr:
        """Parse ``base ( '|' name ( ':' base ( ',' base )* )? )*``.

        Filter chains are parsed in a loop, each call wrapping the previous
        expression as its receiver.
        """
        expr = self._parse_base()
        while self._current.type is TokenType.PIPE:
            self._advance()
            token = self._expect(TokenType.IDENT)
            name = Ident(token.value, token.span)
            span = expr.span.combine(name.span)

            args: list[Expr] = []
            if self._current.type is TokenType.COLON:
                self._advance()
                args.append(self._parse_base())
                while self._current.type is TokenType.COMMA:
                    self._advance()
                    args.append(self._parse_base())
                span = span.combine(args[-1].span)

            expr = Call(span, name=name, receiver=expr, args=tuple(args))
        return expr

    def _parse_base(self) -> Expr:
        token = self._current

        if token.type is TokenType.STRING:
            self._advance()
            return Literal(token.span, value=token.value)

        if token.type is TokenType.NUMBER:
            self._advance()
            return Literal(token.span, value=self._parse_number(token))

        if token.type is TokenType.IDENT:
            if token.value in _KEYWORD_LITERALS:
                self._advance()
                return Literal(token.span, value=_KEYWORD_LITERALS[token.value])
            return self._parse_path()

        raise self._error(f"expected expression, found {token.type.describe()}", token.span)

    def _parse_path(self) -> Var:
        first = self._advance()
        path = [Ident(first.value, first.span)]
        while self._current.type is TokenType.DOT:
            self._advance()
            segment = self._expect(TokenType.IDENT)
            path.append(Ident(segment.value, segment.span))
        return Var(path[0].span.combine(path[-1].span), path=tuple(path))

    def _parse_number(self, token: Token) -> int | float:
        text = token.value
        try:
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)
        except ValueError:
            raise self._error(
                "invalid number literal", token.span, ErrorCode.INVALID_LITERAL
            ) from None
