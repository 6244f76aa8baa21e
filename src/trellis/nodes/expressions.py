"""Expression nodes for the trellis syntax tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from trellis._types import Span
from trellis.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Ident(Node):
    """A name as written in the source, used for lookup and error attribution."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""

    span: Span


@dataclass(frozen=True, slots=True)
class Var(Expr):
    """Variable path: {{ user.names.0 }}"""

    path: Sequence[Ident]


@dataclass(frozen=True, slots=True)
class Literal(Expr):
    """Constant value: string, number, boolean, none."""

    value: Any


@dataclass(frozen=True, slots=True)
class Call(Expr):
    """Filter application: {{ receiver | name: arg, arg }}

    The receiver may itself be a Call, so ``a | f | g`` nests as
    ``Call(g, Call(f, a))``.
    """

    name: Ident
    receiver: Expr
    args: Sequence[Expr] = ()
