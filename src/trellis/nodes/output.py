"""Output nodes for the trellis syntax tree."""

from __future__ import annotations

from dataclasses import dataclass

from trellis._types import Span
from trellis.nodes.base import Node
from trellis.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Raw(Node):
    """Literal template text copied to the output verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class InlineExpr(Node):
    """Output expression: {{ expr }}"""

    expr: Expr
    span: Span
