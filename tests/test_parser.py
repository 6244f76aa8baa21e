"""Tests for the trellis parser."""

from __future__ import annotations

import pytest

from trellis import ErrorCode, Span, TemplateSyntaxError, parse
from trellis.nodes import (
    Call,
    ForLoop,
    IfElse,
    Include,
    InlineExpr,
    Item,
    KeyValue,
    Literal,
    Raw,
    Var,
    With,
)


def _only_stmt(source: str):
    (stmt,) = parse(source).scope.stmts
    return stmt


class TestStatements:
    def test_raw_and_inline(self) -> None:
        template = parse("Hi {{ name }}!")
        raw1, inline, raw2 = template.scope.stmts
        assert raw1 == Raw("Hi ")
        assert raw2 == Raw("!")
        assert isinstance(inline, InlineExpr)
        assert isinstance(inline.expr, Var)
        assert [ident.name for ident in inline.expr.path] == ["name"]
        assert inline.span == Span(6, 10)

    def test_template_keeps_source_and_name(self) -> None:
        template = parse("abc", name="t.txt")
        assert template.source == "abc"
        assert template.name == "t.txt"

    def test_dotted_path_span(self) -> None:
        inline = _only_stmt("{{ user.names.0 }}")
        assert [i.name for i in inline.expr.path] == ["user", "names", "0"]
        assert inline.expr.span == Span(3, 15)
        assert inline.expr.path[2].span == Span(14, 15)

    def test_if_without_else(self) -> None:
        stmt = _only_stmt("{% if a %}yes{% endif %}")
        assert isinstance(stmt, IfElse)
        assert stmt.negate is False
        assert stmt.then_branch.stmts == (Raw("yes"),)
        assert stmt.else_branch is None

    def test_if_else(self) -> None:
        stmt = _only_stmt("{% if a %}yes{% else %}no{% endif %}")
        assert stmt.then_branch.stmts == (Raw("yes"),)
        assert stmt.else_branch.stmts == (Raw("no"),)

    def test_if_not(self) -> None:
        stmt = _only_stmt("{% if not a.b %}x{% endif %}")
        assert stmt.negate is True
        assert [i.name for i in stmt.cond.path] == ["a", "b"]

    def test_for_item(self) -> None:
        stmt = _only_stmt("{% for n in items %}{{ n }}{% endfor %}")
        assert isinstance(stmt, ForLoop)
        assert isinstance(stmt.vars, Item)
        assert stmt.vars.ident.name == "n"
        assert stmt.vars.span == Span(7, 8)
        assert isinstance(stmt.body.stmts[0], InlineExpr)

    def test_for_key_value(self) -> None:
        stmt = _only_stmt("{% for k, v in map %}{% endfor %}")
        assert isinstance(stmt.vars, KeyValue)
        assert stmt.vars.key.name == "k"
        assert stmt.vars.value.name == "v"
        assert stmt.vars.span == Span(7, 11)
        assert stmt.body.stmts == ()

    def test_with(self) -> None:
        stmt = _only_stmt("{% with user.address as addr %}{{ addr.city }}{% endwith %}")
        assert isinstance(stmt, With)
        assert stmt.name.name == "addr"
        assert [i.name for i in stmt.expr.path] == ["user", "address"]

    def test_include(self) -> None:
        stmt = _only_stmt('{% include "footer" %}')
        assert stmt == Include("footer", Span(11, 19), None)

    def test_include_with(self) -> None:
        stmt = _only_stmt('{% include "card" with user %}')
        assert stmt.name == "card"
        assert isinstance(stmt.globals, Var)

    def test_nested_blocks(self) -> None:
        stmt = _only_stmt(
            "{% for x in xs %}{% if x.ok %}{{ x.name }}{% else %}-{% endif %}{% endfor %}"
        )
        (inner,) = stmt.body.stmts
        assert isinstance(inner, IfElse)
        assert inner.else_branch.stmts == (Raw("-"),)


class TestExpressions:
    def test_filter_chain_nests_left_to_right(self) -> None:
        inline = _only_stmt('{{ a | f | g: 1, "x" }}')
        outer = inline.expr
        assert isinstance(outer, Call)
        assert outer.name.name == "g"
        assert [arg.value for arg in outer.args] == [1, "x"]
        inner = outer.receiver
        assert isinstance(inner, Call)
        assert inner.name.name == "f"
        assert inner.args == ()
        assert isinstance(inner.receiver, Var)

    def test_call_spans(self) -> None:
        inline = _only_stmt("{{ a | upper }}")
        assert inline.expr.span == Span(3, 12)
        assert inline.expr.name.span == Span(7, 12)

    @pytest.mark.parametrize(
        ("source", "value"),
        [
            ("true", True),
            ("false", False),
            ("none", None),
            ("42", 42),
            ("-7", -7),
            ("2.5", 2.5),
            ('"hi"', "hi"),
        ],
    )
    def test_literals(self, source: str, value: object) -> None:
        inline = _only_stmt(f"{{{{ {source} }}}}")
        assert isinstance(inline.expr, Literal)
        assert inline.expr.value == value
        assert type(inline.expr.value) is type(value)

    def test_variable_filter_argument(self) -> None:
        inline = _only_stmt("{{ items | join: sep }}")
        (arg,) = inline.expr.args
        assert isinstance(arg, Var)


class TestParseErrors:
    def _error(self, source: str) -> TemplateSyntaxError:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse(source)
        return exc_info.value

    def test_unclosed_block_points_at_keyword(self) -> None:
        err = self._error("{% if x %}abc")
        assert err.message == "unclosed `if` block, expected `endif`"
        assert err.span == Span(3, 5)
        assert err.code is ErrorCode.UNCLOSED_BLOCK

    def test_innermost_unclosed_block_is_reported(self) -> None:
        err = self._error("{% if x %}{% for y in ys %}")
        assert err.message == "unclosed `for` block, expected `endfor`"

    def test_mismatched_end(self) -> None:
        err = self._error("{% if x %}{% endfor %}")
        assert err.message == "unexpected `endfor` block"
        assert err.span == Span(13, 19)

    def test_end_without_open_block(self) -> None:
        err = self._error("abc{% endif %}")
        assert err.message == "unexpected `endif` block"

    def test_else_outside_if(self) -> None:
        err = self._error("{% for x in xs %}{% else %}{% endfor %}")
        assert err.message == "unexpected `else` block"

    def test_double_else(self) -> None:
        err = self._error("{% if x %}{% else %}{% else %}{% endif %}")
        assert err.message == "unexpected `else` block"

    def test_unknown_keyword(self) -> None:
        err = self._error("{% frobnicate %}")
        assert err.message == "unexpected keyword `frobnicate`"
        assert err.code is ErrorCode.UNEXPECTED_KEYWORD

    def test_missing_in(self) -> None:
        err = self._error("{% for x of xs %}{% endfor %}")
        assert err.message == "expected keyword `in`, found `of`"
        assert err.span == Span(9, 11)

    def test_empty_expression(self) -> None:
        err = self._error("{{ }}")
        assert err.message == "expected expression, found end expression"

    def test_trailing_dot(self) -> None:
        err = self._error("{{ a. }}")
        assert err.message == "expected identifier, found end expression"

    def test_filter_without_name(self) -> None:
        err = self._error("{{ a | }}")
        assert err.message == "expected identifier, found end expression"

    def test_junk_after_expression(self) -> None:
        err = self._error("{{ a b }}")
        assert err.message == "expected end expression, found identifier"
        assert err.span == Span(5, 6)

    def test_include_requires_string(self) -> None:
        err = self._error("{% include footer %}")
        assert err.message == "expected string, found identifier"


class TestDeepNesting:
    def test_deeply_nested_blocks_parse_iteratively(self) -> None:
        depth = 20_000
        source = "{% if x %}" * depth + "deep" + "{% endif %}" * depth
        template = parse(source)
        node = template.scope.stmts[0]
        for _ in range(depth - 1):
            node = node.then_branch.stmts[0]
        assert node.then_branch.stmts == (Raw("deep"),)
