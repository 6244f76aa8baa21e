"""Trellis Environment — long-lived configuration shared by templates.

Holds the filter table, the registry of named templates for
``{% include %}``, and render limits. Templates keep a weak reference to
the environment that compiled them.

Thread-Safety:
Filter and template tables are replaced wholesale (copy-on-write) on every
change, so a render running in another thread always sees a consistent
table.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from trellis.environment.exceptions import TemplateNotFoundError
from trellis.environment.filters import DEFAULT_FILTERS
from trellis.environment.registry import Filter, FilterRegistry
from trellis.parser import parse
from trellis.template import Template

if TYPE_CHECKING:
    from trellis.nodes import Template as TemplateNode

logger = logging.getLogger(__name__)


class Environment:
    """Template compilation and rendering configuration.

    Args:
        filters: Extra filters, applied over the built-ins.
        builtin_filters: Install the built-in filters (``upper``, ``join``, ...).
        max_include_depth: Maximum nesting of ``{% include %}``.
        max_depth: Maximum control-flow nesting during render, or None for
            no limit beyond available memory.

    Example:
            >>> env = Environment()
            >>> env.add_filter("shout", lambda s: s.upper() + "!")
            >>> _ = env.add_template("greet", "Hi {{ name | shout }}")
            >>> env.from_string('{% include "greet" %}').render(name="bo")
            'Hi BO!'

    """

    def __init__(
        self,
        *,
        filters: Mapping[str, Filter] | None = None,
        builtin_filters: bool = True,
        max_include_depth: int = 64,
        max_depth: int | None = None,
    ):
        if max_include_depth < 0:
            raise ValueError("max_include_depth must be non-negative")
        if max_depth is not None and max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        self._filters: dict[str, Filter] = dict(DEFAULT_FILTERS) if builtin_filters else {}
        if filters:
            self._filters.update(filters)
        self._templates: dict[str, Template] = {}
        self._template_nodes: dict[str, TemplateNode] = {}
        self.max_include_depth = max_include_depth
        self.max_depth = max_depth

    @property
    def filters(self) -> FilterRegistry:
        """Dict-like access to the filter table."""
        return FilterRegistry(self)

    def add_filter(self, name: str, func: Filter) -> None:
        """Register ``func(value, *args)`` as the filter ``name``."""
        if name in self._filters:
            logger.debug("replacing filter %r", name)
        self.filters[name] = func

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile template source.

        Raises:
            TemplateSyntaxError: If the source is malformed.
        """
        ast = parse(source, name)
        logger.debug("compiled template %r (%d chars)", name or "<string>", len(source))
        return Template(self, ast)

    def add_template(self, name: str, source: str) -> Template:
        """Compile ``source`` and register it under ``name`` for includes."""
        template = self.from_string(source, name)
        self._templates = {**self._templates, name: template}
        self._template_nodes = {**self._template_nodes, name: template.ast}
        logger.debug("registered template %r", name)
        return template

    def get_template(self, name: str) -> Template:
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(f"unknown template `{name}`", name=name) from None

    def list_templates(self) -> list[str]:
        return sorted(self._templates)
