"""Template evaluator.

Walks a compiled syntax tree against a stack of variable scopes and
produces the output text, or raises the first error it meets.

Control flow is interpreted with an explicit stack of frames instead of
recursive calls, so a template nested thousands of levels deep renders
without touching the interpreter's recursion limit:

    ```
    frames                      locals
    ──────                      ──────
    _Block(root)                [globals]
    _Loop(for x in xs)          [globals, {x: ...}]
    _Block(loop body)
    _With(with a as b)          [globals, {x: ...}, {b: ...}]
    _Block(with body)           ← top: statements are pulled from here
    ```

Frames and locals entries are created and destroyed in pairs: a Loop or
With frame owns exactly one locals entry, an Include frame owns a whole
swapped-in locals list, and Block frames own none.

Variable lookup searches the locals from innermost to outermost. A miss on
the *first* path segment falls through to the next outer scope; a miss on
any later segment, or on the outermost scope, is an error.

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from trellis import values
from trellis._types import Span
from trellis.environment.exceptions import (
    BindingError,
    FilterCallError,
    FilterError,
    IncludeDepthError,
    IndexLookupError,
    NestingDepthError,
    RenderTypeError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    UndefinedError,
    UnknownFilterError,
)
from trellis.nodes import (
    Call,
    Expr,
    ForLoop,
    Ident,
    IfElse,
    Include,
    InlineExpr,
    Item,
    Literal,
    LoopVars,
    Raw,
    Scope,
    Template,
    Var,
    With,
)

if TYPE_CHECKING:
    from trellis.environment import Environment


class _Block:
    """Executing the remaining statements of a scope."""

    __slots__ = ("stmts", "template")

    def __init__(self, template: Template, scope: Scope):
        self.template = template
        self.stmts = iter(scope.stmts)


class _Loop:
    """Driving a for loop; owns the top locals entry."""

    __slots__ = ("body", "items", "over_map", "span", "template", "vars")

    def __init__(self, template: Template, stmt: ForLoop, iterable: Any):
        self.template = template
        self.vars = stmt.vars
        self.body = stmt.body
        self.span = stmt.iterable.span
        self.over_map = values.is_map(iterable)
        self.items: Iterator[Any] = iter(iterable.items()) if self.over_map else iter(iterable)

    def next_binding(self) -> dict[str, Any] | None:
        """Bind the next element to the loop variables, or None when exhausted."""
        try:
            item = next(self.items)
        except StopIteration:
            return None

        vars: LoopVars = self.vars
        if self.over_map:
            if isinstance(vars, Item):
                raise _error(
                    BindingError,
                    "cannot unpack map item into one variable",
                    self.template,
                    vars.span,
                )
            key, value = item
            return {vars.key.name: key, vars.value.name: value}

        if not isinstance(vars, Item):
            raise _error(
                BindingError,
                "cannot unpack list item into two variables",
                self.template,
                vars.span,
            )
        return {vars.ident.name: item}


class _With:
    """Body of a with block is running; owns the top locals entry."""

    __slots__ = ()


class _Include:
    """An included template is running against its own locals list."""

    __slots__ = ("saved_locals",)

    def __init__(self, saved_locals: list[Any]):
        self.saved_locals = saved_locals


_WITH = _With()


class _LookupFailure(Exception):
    """A path segment could not be resolved in one scope.

    Cheap to raise; only turned into a positioned TemplateRuntimeError once
    scope fallback is exhausted.
    """

    def __init__(self, error_class: type[TemplateRuntimeError], message: str, span: Span):
        self.error_class = error_class
        self.message = message
        self.span = span


def _error(
    error_class: type[TemplateRuntimeError] | type[TemplateNotFoundError],
    message: str,
    template: Template,
    span: Span,
) -> Exception:
    return error_class(message, source=template.source, span=span, name=template.name)


class Renderer:
    """Single-use evaluator for one render call.

    All mutable state (output buffer, frame stack, locals stack) lives on
    the instance, so concurrent renders of one template never share any.
    """

    __slots__ = ("_env", "_filters", "_include_depth", "_locals", "_template")

    def __init__(self, env: Environment, template: Template, globals: Any):
        self._env = env
        # Snapshot: the registry swaps in a new dict on every change
        self._filters = env._filters
        self._template = template
        self._locals: list[Any] = [globals]
        self._include_depth = 0

    def render(self) -> str:
        buf: list[str] = []
        stack: list[object] = [_Block(self._template, self._template.scope)]

        while stack:
            frame = stack[-1]

            if type(frame) is _Block:
                if self._run_block(frame, buf, stack):
                    continue
            elif type(frame) is _Loop:
                binding = frame.next_binding()
                if binding is not None:
                    self._locals[-1] = binding
                    self._push(stack, _Block(frame.template, frame.body), frame.template, frame.span)
                    continue

            self._exit(stack.pop())

        return "".join(buf)

    def _run_block(self, frame: _Block, buf: list[str], stack: list[object]) -> bool:
        """Run statements until one opens a nested frame (True) or none remain (False)."""
        template = frame.template
        for stmt in frame.stmts:
            if isinstance(stmt, Raw):
                buf.append(stmt.text)

            elif isinstance(stmt, InlineExpr):
                value = self._eval(template, stmt.expr)
                text = values.format_scalar(value)
                if text is None:
                    raise _error(
                        RenderTypeError,
                        f"expected renderable value, but expression evaluated to {values.kind(value)}",
                        template,
                        stmt.expr.span,
                    )
                buf.append(text)

            elif isinstance(stmt, IfElse):
                cond = self._eval(template, stmt.cond)
                if not isinstance(cond, bool):
                    raise _error(
                        RenderTypeError,
                        f"expected bool, but expression evaluated to {values.kind(cond)}",
                        template,
                        stmt.cond.span,
                    )
                branch = stmt.then_branch if cond != stmt.negate else stmt.else_branch
                if branch is not None:
                    self._push(stack, _Block(template, branch), template, stmt.cond.span)
                    return True

            elif isinstance(stmt, ForLoop):
                iterable = self._eval(template, stmt.iterable)
                if not (values.is_list(iterable) or values.is_map(iterable)):
                    raise _error(
                        RenderTypeError,
                        f"expected iterable, but expression evaluated to {values.kind(iterable)}",
                        template,
                        stmt.iterable.span,
                    )
                self._push(stack, _Loop(template, stmt, iterable), template, stmt.iterable.span)
                # Placeholder, overwritten by each iteration's binding
                self._locals.append(None)
                return True

            elif isinstance(stmt, With):
                value = self._eval(template, stmt.expr)
                self._push(stack, _WITH, template, stmt.expr.span)
                self._locals.append({stmt.name.name: value})
                self._push(stack, _Block(template, stmt.body), template, stmt.expr.span)
                return True

            elif isinstance(stmt, Include):
                self._enter_include(stmt, template, stack)
                return True

        return False

    def _enter_include(self, stmt: Include, template: Template, stack: list[object]) -> None:
        included = self._env._template_nodes.get(stmt.name)
        if included is None:
            raise _error(
                TemplateNotFoundError, f"unknown template `{stmt.name}`", template, stmt.span
            )
        limit = self._env.max_include_depth
        if self._include_depth >= limit:
            raise _error(
                IncludeDepthError, f"reached maximum include depth ({limit})", template, stmt.span
            )

        if stmt.globals is not None:
            locals_ = [self._eval(template, stmt.globals)]
        else:
            locals_ = self._locals

        self._push(stack, _Include(self._locals), template, stmt.span)
        self._locals = locals_
        self._include_depth += 1
        self._push(stack, _Block(included, included.scope), template, stmt.span)

    def _push(self, stack: list[object], frame: object, template: Template, span: Span) -> None:
        limit = self._env.max_depth
        if limit is not None and len(stack) >= limit:
            raise _error(
                NestingDepthError, f"reached maximum nesting depth ({limit})", template, span
            )
        stack.append(frame)

    def _exit(self, frame: object) -> None:
        if type(frame) is _Loop or frame is _WITH:
            self._locals.pop()
        elif type(frame) is _Include:
            self._locals = frame.saved_locals
            self._include_depth -= 1

    # -- expressions --------------------------------------------------------

    def _eval(self, template: Template, expr: Expr) -> Any:
        """Evaluate an expression.

        A filter chain ``a | f | g`` is unwound and applied left to right:
        the receiver is always evaluated before the filter is looked up.
        """
        calls: list[Call] = []
        while isinstance(expr, Call):
            calls.append(expr)
            expr = expr.receiver

        if isinstance(expr, Var):
            value = self._resolve(template, expr.path)
        elif isinstance(expr, Literal):
            value = expr.value
        else:
            raise TypeError(f"unsupported expression node {type(expr).__name__}")

        for call in reversed(calls):
            value = self._apply_filter(template, call, value)
        return value

    def _apply_filter(self, template: Template, call: Call, value: Any) -> Any:
        func = self._filters.get(call.name.name)
        if func is None:
            raise _error(UnknownFilterError, "unknown filter function", template, call.name.span)
        args = [self._eval(template, arg) for arg in call.args]
        try:
            return func(value, *args)
        except FilterError as exc:
            raise _error(FilterCallError, exc.message, template, call.name.span) from exc

    def _resolve(self, template: Template, path: Sequence[Ident]) -> Any:
        for depth in range(len(self._locals) - 1, -1, -1):
            result = self._locals[depth]
            for index, segment in enumerate(path):
                try:
                    result = _lookup(result, segment)
                except _LookupFailure as failure:
                    # Only an unbound root name falls back to outer scopes
                    if index == 0 and depth != 0:
                        break
                    raise _error(
                        failure.error_class, failure.message, template, failure.span
                    ) from None
            else:
                return result

        raise _error(UndefinedError, "not found in map", template, path[0].span)


def _lookup(value: Any, segment: Ident) -> Any:
    if values.is_list(value):
        name = segment.name
        if not (name.isascii() and name.isdigit()):
            raise _LookupFailure(IndexLookupError, "cannot index list with string", segment.span)
        index = int(name)
        if index >= len(value):
            raise _LookupFailure(
                IndexLookupError,
                f"index out of bounds, the length is {len(value)}",
                segment.span,
            )
        return value[index]

    if values.is_map(value):
        if segment.name in value:
            return value[segment.name]
        raise _LookupFailure(UndefinedError, "not found in map", segment.span)

    raise _LookupFailure(
        IndexLookupError, f"cannot index into {values.kind(value)}", segment.span
    )


def render(template: Template, globals: Any, env: Environment | None = None) -> str:
    """Render a compiled syntax tree against ``globals``.

    Args:
        template: Parsed template node.
        globals: Root value, usually a mapping of variable names.
        env: Supplies filters, included templates and limits. A default
            Environment is used when omitted.

    Returns:
        The rendered text.

    Raises:
        TemplateRuntimeError: The first error met, positioned in the source.
        TemplateNotFoundError: An include named an unregistered template.
    """
    if env is None:
        from trellis.environment import Environment

        env = Environment()
    return Renderer(env, template, globals).render()
