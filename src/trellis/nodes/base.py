"""Base node class for the trellis syntax tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all syntax tree nodes.

    Nodes are immutable so a compiled template can be shared between
    threads and rendered concurrently.

    """
