"""Structural nodes for the trellis syntax tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trellis._types import Span
from trellis.nodes.base import Node
from trellis.nodes.expressions import Expr, Ident


@dataclass(frozen=True, slots=True)
class Scope(Node):
    """An ordered block of statements: template root, branch, or loop body."""

    stmts: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: the original source plus its top-level scope."""

    source: str
    scope: Scope
    name: str | None = None


@dataclass(frozen=True, slots=True)
class With(Node):
    """Bind a value for a block: {% with expr as name %}...{% endwith %}"""

    expr: Expr
    name: Ident
    body: Scope


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Render another template: {% include "name" [with expr] %}"""

    name: str
    span: Span
    globals: Expr | None = None
