"""Deeply nested templates render without exhausting the interpreter stack."""

from __future__ import annotations

import sys

import pytest

from trellis import Environment, NestingDepthError, Span, UndefinedError, render
from trellis.nodes import Ident, IfElse, InlineExpr, Raw, Scope, Template, Var

DEPTH = 100_000


def _nested_ifs(depth: int, innermost: Scope) -> Template:
    source = "{{ ok }}"
    cond = Var(Span(3, 5), path=(Ident("ok", Span(3, 5)),))
    scope = innermost
    for _ in range(depth):
        scope = Scope((IfElse(cond=cond, then_branch=scope),))
    return Template(source, scope)


class TestExplicitStack:
    def test_depth_exceeds_recursion_limit(self) -> None:
        assert DEPTH > sys.getrecursionlimit() * 10

    def test_nested_conditionals_render(self) -> None:
        template = _nested_ifs(DEPTH, Scope((Raw("deep"),)))
        assert render(template, {"ok": True}) == "deep"

    def test_nested_conditionals_fail_cleanly(self) -> None:
        missing = Var(Span(3, 5), path=(Ident("nope", Span(3, 5)),))
        template = _nested_ifs(DEPTH, Scope((InlineExpr(missing, missing.span),)))
        with pytest.raises(UndefinedError) as exc_info:
            render(template, {"ok": True})
        assert exc_info.value.span == Span(3, 5)

    def test_nested_loops_from_source(self, env: Environment) -> None:
        depth = 10_000
        source = (
            "{% for a in xs %}"
            + "{% for a in a %}" * (depth - 1)
            + "{{ a }}"
            + "{% endfor %}" * depth
        )
        xs: object = "leaf"
        for _ in range(depth):
            xs = [xs]
        assert env.from_string(source).render(xs=xs) == "leaf"

    def test_nested_ifs_from_source(self, env: Environment) -> None:
        depth = 20_000
        source = "{% if ok %}" * depth + "{{ msg }}" + "{% endif %}" * depth
        assert env.from_string(source).render(ok=True, msg="hi") == "hi"


class TestDepthLimit:
    def test_max_depth_is_enforced(self) -> None:
        env = Environment(max_depth=50)
        source = "{% if ok %}" * 100 + "x" + "{% endif %}" * 100
        with pytest.raises(NestingDepthError) as exc_info:
            env.from_string(source).render(ok=True)
        assert exc_info.value.message == "reached maximum nesting depth (50)"

    def test_within_limit_renders(self) -> None:
        env = Environment(max_depth=50)
        source = "{% if ok %}" * 10 + "x" + "{% endif %}" * 10
        assert env.from_string(source).render(ok=True) == "x"

    def test_loop_body_counts_toward_depth(self) -> None:
        env = Environment(max_depth=2)
        with pytest.raises(NestingDepthError):
            env.from_string("{% for x in xs %}{{ x }}{% endfor %}").render(xs=[1])
