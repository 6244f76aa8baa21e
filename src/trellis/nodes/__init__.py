"""Immutable syntax tree for trellis templates.

Statements:
    Raw, InlineExpr, IfElse, ForLoop, With, Include

Expressions:
    Var, Literal, Call

"""

from trellis.nodes.base import Node
from trellis.nodes.control_flow import ForLoop, IfElse, Item, KeyValue, LoopVars
from trellis.nodes.expressions import Call, Expr, Ident, Literal, Var
from trellis.nodes.output import InlineExpr, Raw
from trellis.nodes.structure import Include, Scope, Template, With

__all__ = [
    "Call",
    "Expr",
    "ForLoop",
    "Ident",
    "IfElse",
    "Include",
    "InlineExpr",
    "Item",
    "KeyValue",
    "Literal",
    "LoopVars",
    "Node",
    "Raw",
    "Scope",
    "Template",
    "Var",
    "With",
]
