"""Trellis — a small, strict text template engine.

Fills text documents (HTML fragments, config files, emails) from
structured data without embedding a general-purpose scripting language.

Quickstart:
    >>> from trellis import Environment
    >>> env = Environment()
    >>> env.from_string("Hi {{ name }}!").render(name="Bo")
    'Hi Bo!'

Architecture:
Template Source → Lexer → Parser → syntax tree → Renderer → str

Pipeline stages:
1. **Lexer**: Splits source into raw text and tag tokens, each with a Span
2. **Parser**: Builds an immutable syntax tree (iteratively, no recursion)
3. **Renderer**: Walks the tree with an explicit frame stack and a stack
   of variable scopes

Syntax:
    {{ user.name | upper }}                 output
    {{ items | join: ", " }}                filter with arguments
    {% if [not] cond %}...{% else %}...{% endif %}
    {% for item in list %}...{% endfor %}
    {% for key, value in map %}...{% endfor %}
    {% with expr as name %}...{% endwith %}
    {% include "name" [with expr] %}
    {# comment #}

Strict by design:
Missing variables, non-bool conditions and unknown filters are errors,
never empty output. Every error points at the offending source text:

    ```
    UndefinedError: not found in map
      --> <template>:1:3
       |
     1 | {{ missing }}
       |    ^^^^^^^ not found in map
    ```

Thread-Safety:
Templates and environments are read-only during rendering; each render
keeps its state in locals, so one template can render on many threads.

"""

from trellis._types import Span, Token, TokenType
from trellis.environment import (
    BindingError,
    Environment,
    ErrorCode,
    FilterCallError,
    FilterError,
    FilterRegistry,
    IncludeDepthError,
    IndexLookupError,
    NestingDepthError,
    RenderTypeError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    UnknownFilterError,
    build_source_snippet,
)
from trellis.lexer import tokenize
from trellis.parser import parse
from trellis.template import Template, render

__version__ = "0.1.0"

__all__ = [
    "BindingError",
    "Environment",
    "ErrorCode",
    "FilterCallError",
    "FilterError",
    "FilterRegistry",
    "IncludeDepthError",
    "IndexLookupError",
    "NestingDepthError",
    "RenderTypeError",
    "SourceSnippet",
    "Span",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "UnknownFilterError",
    "__version__",
    "build_source_snippet",
    "parse",
    "render",
    "tokenize",
]
