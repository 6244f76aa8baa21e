"""Trellis Template — compiled template object ready for rendering.

The Template class wraps the immutable syntax tree produced by the parser
and provides the ``render()`` API.

Memory Safety:
Uses ``weakref.ref(env)`` to break the cycle
``Template → (weak) → Environment → templates → Template``.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (buffer, frame and scope stacks)
- Multiple threads can call ``render()`` concurrently

"""

from __future__ import annotations

import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from trellis.template.renderer import Renderer

if TYPE_CHECKING:
    from trellis.environment import Environment
    from trellis.nodes import Template as TemplateNode


class Template:
    """Compiled template ready for rendering.

    Example:
            >>> from trellis import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name | upper }}!")
            >>> t.render(name="World")
            'Hello, WORLD!'

            >>> t.render({"name": "World"})  # Mapping context also works
            'Hello, WORLD!'

    """

    __slots__ = ("_ast", "_env_ref")

    def __init__(self, env: Environment, ast: TemplateNode):
        self._env_ref = weakref.ref(env)
        self._ast = ast

    @property
    def env(self) -> Environment:
        env = self._env_ref()
        if env is None:
            raise RuntimeError("Environment has been garbage collected")
        return env

    @property
    def name(self) -> str | None:
        return self._ast.name

    @property
    def source(self) -> str:
        return self._ast.source

    @property
    def ast(self) -> TemplateNode:
        """The parsed syntax tree."""
        return self._ast

    def render(self, globals: Any = None, /, **context: Any) -> str:
        """Render the template.

        Args:
            globals: Root value for variable lookup, usually a mapping.
            **context: Extra variables, merged over ``globals``.

        Raises:
            TemplateRuntimeError: On the first render-time error.
        """
        if globals is None:
            data: Any = context
        elif context:
            if not isinstance(globals, Mapping):
                raise TypeError(
                    f"keyword variables require mapping globals, got {type(globals).__name__}"
                )
            data = {**globals, **context}
        else:
            data = globals
        return Renderer(self.env, self._ast, data).render()

    def __repr__(self) -> str:
        return f"<Template {self.name or '<string>'!r}>"
