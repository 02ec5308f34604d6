# themepreview/core/templating/__init__.py
"""
Templating module for themepreview.

Provides the TemplateEngine with storefront tags and filters registered, the
build_render_context function that prepares mock data for a component, and
the category-based fallback templates and preview stylesheets.
"""
from .engine import TemplateEngine
from .context_builder import build_render_context
from .default_templates import generate_template, preview_css

__all__ = [
    "TemplateEngine",
    "build_render_context",
    "generate_template",
    "preview_css",
]
