"""Control flow nodes for the trellis syntax tree."""

from __future__ import annotations

from dataclasses import dataclass

from trellis._types import Span
from trellis.nodes.base import Node
from trellis.nodes.expressions import Expr, Ident
from trellis.nodes.structure import Scope


@dataclass(frozen=True, slots=True)
class IfElse(Node):
    """Conditional: {% if [not] cond %}...{% else %}...{% endif %}"""

    cond: Expr
    then_branch: Scope
    else_branch: Scope | None = None
    negate: bool = False


@dataclass(frozen=True, slots=True)
class Item(Node):
    """Single loop binding, valid only for lists: {% for item in ... %}"""

    ident: Ident

    @property
    def span(self) -> Span:
        return self.ident.span


@dataclass(frozen=True, slots=True)
class KeyValue(Node):
    """Pair loop binding, valid only for maps: {% for key, value in ... %}"""

    key: Ident
    value: Ident
    span: Span


LoopVars = Item | KeyValue


@dataclass(frozen=True, slots=True)
class ForLoop(Node):
    """For loop: {% for vars in iterable %}...{% endfor %}"""

    vars: LoopVars
    iterable: Expr
    body: Scope
