"""
Template rendering package.

Expands $NAME placeholders against an immutable, escape-aware scope.
"""

from .scope import RenderScope
from .template import BASE_TEMPLATE, PACKAGED_TEMPLATES, TemplateRenderer, expand

__all__ = [
    "BASE_TEMPLATE",
    "PACKAGED_TEMPLATES",
    "RenderScope",
    "TemplateRenderer",
    "expand",
]
