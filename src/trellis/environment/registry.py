"""Filter table access for the trellis environment."""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trellis.environment.core import Environment

Filter = Callable[..., Any]


class FilterRegistry(MutableMapping[str, Filter]):
    """Mutable mapping view of ``Environment._filters``.

    Writes never touch the current table: each one installs a modified
    copy, so a render that already took its snapshot keeps seeing a
    complete table.

    Example:
        >>> env.filters["shout"] = lambda s: s.upper() + "!"
        >>> "shout" in env.filters
        True
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment):
        self._env = env

    def __getitem__(self, name: str) -> Filter:
        return self._env._filters[name]

    def __setitem__(self, name: str, func: Filter) -> None:
        self._env._filters = {**self._env._filters, name: func}

    def __delitem__(self, name: str) -> None:
        table = dict(self._env._filters)
        del table[name]
        self._env._filters = table

    def __iter__(self) -> Iterator[str]:
        return iter(self._env._filters)

    def __len__(self) -> int:
        return len(self._env._filters)

    def copy(self) -> dict[str, Filter]:
        """Snapshot of the current table as a plain dict."""
        return dict(self._env._filters)
