"""Exceptions for the trellis template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Lex/parse-time error
├── TemplateNotFoundError     # Unknown template name
└── TemplateRuntimeError      # Render-time error
    ├── RenderTypeError       # Value of the wrong kind for its position
    ├── UndefinedError        # Path segment not found
    ├── IndexLookupError      # Bad list index or index into a scalar
    ├── BindingError          # Loop variables don't match the iterable
    ├── UnknownFilterError    # Filter name not registered
    ├── FilterCallError       # A filter raised FilterError
    ├── IncludeDepthError     # Include chain too deep
    └── NestingDepthError     # Control flow nested beyond the limit

FilterError is raised by filter implementations and re-raised by the
renderer as a positioned FilterCallError.

Every TemplateError raised by the engine carries the template source and
the span of the offending token, and renders a caret diagnostic:

    ```

       |
     1 | Hi {{ missing }}!
       |       ^^^^^^^ not found in map
    ```

"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum

from trellis._types import Span
from trellis.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for trellis template errors.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (template lookup)
    """

    # Lexer errors (T-LEX-xxx)
    UNEXPECTED_END_TAG = "T-LEX-001"
    UNCLOSED_BEGIN_TAG = "T-LEX-002"
    UNEXPECTED_CHARACTER = "T-LEX-003"
    UNDELIMITED_STRING = "T-LEX-004"

    # Parser errors (T-PAR-xxx)
    UNEXPECTED_TOKEN = "T-PAR-001"
    UNCLOSED_BLOCK = "T-PAR-002"
    UNEXPECTED_KEYWORD = "T-PAR-003"
    INVALID_LITERAL = "T-PAR-004"

    # Runtime errors (T-RUN-xxx)
    UNDEFINED_VARIABLE = "T-RUN-001"
    TYPE_MISMATCH = "T-RUN-002"
    INDEX_ERROR = "T-RUN-003"
    BINDING_ERROR = "T-RUN-004"
    UNKNOWN_FILTER = "T-RUN-005"
    FILTER_ERROR = "T-RUN-006"
    INCLUDE_DEPTH = "T-RUN-007"
    NESTING_DEPTH = "T-RUN-008"

    # Template lookup errors (T-TPL-xxx)
    TEMPLATE_NOT_FOUND = "T-TPL-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def display_width(text: str) -> int:
    """Terminal column width of ``text`` (wide CJK/emoji count as two)."""
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """The source line containing a span, with the span's position on it.

    Attributes:
        lineno: 1-based line number of the span start.
        line: Text of that line (without the line terminator).
        column: Display column of the span start within the line.
        width: Display width of the underlined text, at least 1.
    """

    lineno: int
    line: str
    column: int
    width: int

    @property
    def col_offset(self) -> int:
        return self.column

    def format(self, message: str, *, color: bool = False) -> str:
        """Format the snippet in Rust-inspired diagnostic style.

        With ``color=False`` the output is stable and plain::

            (blank line)
               |
             1 | lorem ipsum }} dolor sit amet
               |             ^^ unexpected end tag
        """
        num = str(self.lineno)
        pad = " " * len(num)
        underline = "^" * self.width
        if color:
            gutter = terminal.dim_text(f" {pad} |")
            num_col = terminal.line_number(f" {num}")
            marker = terminal.error_line(f"{underline} {message}")
        else:
            gutter = f" {pad} |"
            num_col = f" {num}"
            marker = f"{underline} {message}"
        return f"\n{gutter}\n{num_col} | {self.line}\n{gutter} {' ' * self.column}{marker}\n"


def build_source_snippet(source: str, span: Span) -> SourceSnippet:
    """Build a SourceSnippet for ``span`` within ``source``.

    Spans that run past the end of their first line are clipped to it.
    """
    start = min(span.start, len(source))
    line_start = source.rfind("\n", 0, start) + 1
    line_end = source.find("\n", start)
    if line_end == -1:
        line_end = len(source)
    line = source[line_start:line_end].rstrip("\r")
    lineno = source.count("\n", 0, start) + 1
    column = display_width(source[line_start:start])
    width = display_width(source[start : min(span.end, line_end)])
    return SourceSnippet(lineno=lineno, line=line, column=column, width=max(width, 1))


class TemplateError(Exception):
    """Base exception for all trellis template errors.

    All template-related exceptions inherit from this class, enabling
    broad exception handling:

        >>> try:
        ...     template.render(data)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        message: Short description of what went wrong.
        source: Template source the span points into (if known).
        span: Offending range in ``source`` (if known).
        name: Template name (if known).
        code: ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        span: Span | None = None,
        name: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.source = source
        self.span = span
        self.name = name
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def snippet(self) -> SourceSnippet | None:
        if self.source is None or self.span is None:
            return None
        return build_source_snippet(self.source, self.span)

    @property
    def lineno(self) -> int | None:
        """Line number where the error occurred (1-based)."""
        snippet = self.snippet
        return snippet.lineno if snippet else None

    @property
    def col_offset(self) -> int | None:
        """Display column where the error occurred (0-based)."""
        snippet = self.snippet
        return snippet.column if snippet else None

    @property
    def location(self) -> str:
        loc = self.name or "<template>"
        snippet = self.snippet
        if snippet:
            loc += f":{snippet.lineno}:{snippet.column}"
        return loc

    def _format_message(self) -> str:
        snippet = self.snippet
        if snippet is None:
            return self.message
        return f"{self.message}\n  --> {self.location}" + snippet.format(self.message).rstrip("\n")

    def pretty(self) -> str:
        """Caret diagnostic pointing at the span, without colors.

        Falls back to the bare message when no source is attached.
        """
        snippet = self.snippet
        if snippet is None:
            return self.message
        return snippet.format(self.message)

    def format_compact(self) -> str:
        """Format error as a structured, human-readable terminal diagnostic.

        Format::

            T-RUN-001: not found in map
              --> greeting.txt:1:6
               |
             1 | Hi {{ missing }}!
               |       ^^^^^^^ not found in map
        """
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(self.location)}",
        ]
        snippet = self.snippet
        if snippet:
            parts.append(snippet.format(self.message, color=True).strip("\n"))
        return "\n".join(parts)


class TemplateSyntaxError(TemplateError):
    """Lex- or parse-time error in template source."""

    code: ErrorCode | None = ErrorCode.UNEXPECTED_TOKEN


class TemplateNotFoundError(TemplateError):
    """No template registered under the requested name."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateRuntimeError(TemplateError):
    """Render-time error. Rendering is fail-fast: no partial output is kept."""


class RenderTypeError(TemplateRuntimeError):
    """An expression evaluated to a value of the wrong kind.

    Raised for non-bool conditions, non-iterable loop targets and
    non-renderable inline expressions.
    """

    code: ErrorCode | None = ErrorCode.TYPE_MISMATCH


class UndefinedError(TemplateRuntimeError):
    """A variable path segment was not found.

    Missing variables are always an error; they never render as empty.
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE


class IndexLookupError(TemplateRuntimeError):
    """Invalid list index, or an attempt to index into a scalar."""

    code: ErrorCode | None = ErrorCode.INDEX_ERROR


class BindingError(TemplateRuntimeError):
    """Loop variables don't match the shape of the iterated value."""

    code: ErrorCode | None = ErrorCode.BINDING_ERROR


class UnknownFilterError(TemplateRuntimeError):
    code: ErrorCode | None = ErrorCode.UNKNOWN_FILTER


class FilterCallError(TemplateRuntimeError):
    """A filter rejected its input by raising FilterError."""

    code: ErrorCode | None = ErrorCode.FILTER_ERROR


class IncludeDepthError(TemplateRuntimeError):
    code: ErrorCode | None = ErrorCode.INCLUDE_DEPTH


class NestingDepthError(TemplateRuntimeError):
    code: ErrorCode | None = ErrorCode.NESTING_DEPTH


class FilterError(Exception):
    """Raised by a filter function to reject its arguments.

    The renderer converts it into a FilterCallError pointing at the filter
    name in the template source.

    Example:
        >>> def first(value):
        ...     if not value:
        ...         raise FilterError("cannot take first of empty list")
        ...     return value[0]
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
