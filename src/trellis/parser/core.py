"""Parser: token stream to syntax tree.

Block statements are parsed without recursion. Each open ``if``/``for``/
``with`` sits on an explicit stack until its end tag closes it, so template
nesting depth is limited by memory rather than by the interpreter stack.

"""

from __future__ import annotations

import logging

from trellis._types import Span, Token, TokenType
from trellis.environment.exceptions import ErrorCode, TemplateSyntaxError
from trellis.lexer import tokenize
from trellis.nodes import (
    Expr,
    ForLoop,
    Ident,
    IfElse,
    Include,
    InlineExpr,
    Item,
    KeyValue,
    Node,
    Raw,
    Scope,
    Template,
    With,
)
from trellis.parser.expressions import ExpressionParsingMixin

logger = logging.getLogger(__name__)

_END_KEYWORDS = {"if": "endif", "for": "endfor", "with": "endwith"}


class _OpenBlock:
    """A block statement whose end tag hasn't been seen yet."""

    __slots__ = ("fields", "keyword", "kind", "stmts", "then_stmts")

    def __init__(self, kind: str, keyword: Token, **fields: object):
        self.kind = kind
        self.keyword = keyword
        self.fields = fields
        self.stmts: list[Node] = []
        self.then_stmts: list[Node] | None = None

    def close(self) -> Node:
        if self.kind == "if":
            if self.then_stmts is None:
                return IfElse(then_branch=Scope(tuple(self.stmts)), **self.fields)
            return IfElse(
                then_branch=Scope(tuple(self.then_stmts)),
                else_branch=Scope(tuple(self.stmts)),
                **self.fields,
            )
        if self.kind == "for":
            return ForLoop(body=Scope(tuple(self.stmts)), **self.fields)
        return With(body=Scope(tuple(self.stmts)), **self.fields)


class Parser(ExpressionParsingMixin):
    """Build a Template node from template source.

    Example:
        >>> template = Parser("Hi {{ name }}!").parse()
        >>> [type(s).__name__ for s in template.scope.stmts]
        ['Raw', 'InlineExpr', 'Raw']

    """

    def __init__(self, source: str, name: str | None = None):
        self._source = source
        self._name = name
        self._tokens = tokenize(source, name)
        self._index = 0
        self._root: list[Node] = []
        self._blocks: list[_OpenBlock] = []

    # -- token navigation ---------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.type is not TokenType.EOF:
            self._index += 1
        return token

    def _expect(self, token_type: TokenType) -> Token:
        token = self._current
        if token.type is not token_type:
            raise self._error(
                f"expected {token_type.describe()}, found {token.type.describe()}",
                token.span,
            )
        return self._advance()

    def _expect_keyword(self, keyword: str) -> Token:
        token = self._current
        if token.type is not TokenType.IDENT or token.value != keyword:
            found = f"`{token.value}`" if token.type is TokenType.IDENT else token.type.describe()
            raise self._error(f"expected keyword `{keyword}`, found {found}", token.span)
        return self._advance()

    def _error(
        self, message: str, span: Span, code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN
    ) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message, source=self._source, span=span, name=self._name, code=code
        )

    # -- statements ---------------------------------------------------------

    @property
    def _stmts(self) -> list[Node]:
        return self._blocks[-1].stmts if self._blocks else self._root

    def parse(self) -> Template:
        while True:
            token = self._current
            if token.type is TokenType.EOF:
                break
            if token.type is TokenType.RAW:
                self._advance()
                self._stmts.append(Raw(token.value))
            elif token.type is TokenType.BEGIN_EXPR:
                self._advance()
                expr = self._parse_expr()
                self._expect(TokenType.END_EXPR)
                self._stmts.append(InlineExpr(expr, expr.span))
            else:
                self._expect(TokenType.BEGIN_BLOCK)
                self._parse_block_tag()

        if self._blocks:
            block = self._blocks[-1]
            raise self._error(
                f"unclosed `{block.kind}` block, expected `{_END_KEYWORDS[block.kind]}`",
                block.keyword.span,
                ErrorCode.UNCLOSED_BLOCK,
            )

        logger.debug("parsed template %r (%d top-level statements)", self._name, len(self._root))
        return Template(self._source, Scope(tuple(self._root)), self._name)

    def _parse_block_tag(self) -> None:
        keyword = self._expect(TokenType.IDENT)
        handler = {
            "if": self._parse_if,
            "else": self._parse_else,
            "for": self._parse_for,
            "with": self._parse_with,
            "include": self._parse_include,
            "endif": self._parse_end,
            "endfor": self._parse_end,
            "endwith": self._parse_end,
        }.get(keyword.value)
        if handler is None:
            raise self._error(
                f"unexpected keyword `{keyword.value}`", keyword.span, ErrorCode.UNEXPECTED_KEYWORD
            )
        handler(keyword)

    def _parse_if(self, keyword: Token) -> None:
        """Parse {% if [not] cond %}."""
        negate = False
        if self._current.type is TokenType.IDENT and self._current.value == "not":
            self._advance()
            negate = True
        cond = self._parse_expr()
        self._expect(TokenType.END_BLOCK)
        self._blocks.append(_OpenBlock("if", keyword, cond=cond, negate=negate))

    def _parse_else(self, keyword: Token) -> None:
        block = self._blocks[-1] if self._blocks else None
        if block is None or block.kind != "if" or block.then_stmts is not None:
            raise self._error(
                "unexpected `else` block", keyword.span, ErrorCode.UNEXPECTED_KEYWORD
            )
        self._expect(TokenType.END_BLOCK)
        block.then_stmts, block.stmts = block.stmts, []

    def _parse_for(self, keyword: Token) -> None:
        """Parse {% for item in expr %} or {% for key, value in expr %}."""
        first = self._expect(TokenType.IDENT)
        vars: Item | KeyValue
        if self._current.type is TokenType.COMMA:
            self._advance()
            second = self._expect(TokenType.IDENT)
            vars = KeyValue(
                key=Ident(first.value, first.span),
                value=Ident(second.value, second.span),
                span=first.span.combine(second.span),
            )
        else:
            vars = Item(Ident(first.value, first.span))
        self._expect_keyword("in")
        iterable = self._parse_expr()
        self._expect(TokenType.END_BLOCK)
        self._blocks.append(_OpenBlock("for", keyword, vars=vars, iterable=iterable))

    def _parse_with(self, keyword: Token) -> None:
        """Parse {% with expr as name %}."""
        expr = self._parse_expr()
        self._expect_keyword("as")
        name = self._expect(TokenType.IDENT)
        self._expect(TokenType.END_BLOCK)
        self._blocks.append(
            _OpenBlock("with", keyword, expr=expr, name=Ident(name.value, name.span))
        )

    def _parse_include(self, keyword: Token) -> None:
        """Parse {% include "name" [with expr] %}."""
        name = self._expect(TokenType.STRING)
        globals_: Expr | None = None
        if self._current.type is TokenType.IDENT and self._current.value == "with":
            self._advance()
            globals_ = self._parse_expr()
        self._expect(TokenType.END_BLOCK)
        self._stmts.append(Include(name.value, name.span, globals_))

    def _parse_end(self, keyword: Token) -> None:
        block = self._blocks[-1] if self._blocks else None
        if block is None or _END_KEYWORDS[block.kind] != keyword.value:
            raise self._error(
                f"unexpected `{keyword.value}` block", keyword.span, ErrorCode.UNEXPECTED_KEYWORD
            )
        self._expect(TokenType.END_BLOCK)
        self._blocks.pop()
        self._stmts.append(block.close())


def parse(source: str, name: str | None = None) -> Template:
    """Parse ``source`` into a Template node; raises TemplateSyntaxError."""
    return Parser(source, name).parse()
