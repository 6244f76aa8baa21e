"""Environment, filters and error types."""

from trellis.environment.exceptions import (
    BindingError,
    ErrorCode,
    FilterCallError,
    FilterError,
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
from trellis.environment.registry import FilterRegistry
from trellis.environment.core import Environment

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
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndefinedError",
    "UnknownFilterError",
    "build_source_snippet",
]
