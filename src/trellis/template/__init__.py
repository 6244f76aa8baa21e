"""Compiled templates and the evaluator that renders them."""

from trellis.template.core import Template
from trellis.template.renderer import Renderer, render

__all__ = ["Renderer", "Template", "render"]
