"""Template engine, helpers and output sinks."""

from .engine import Template, TemplateEngine, compile_template, render_template
from .helpers import Helper, HelperRegistry, default_registry
from .io import atomic_write_text, write_output

__all__ = [
    "Helper",
    "HelperRegistry",
    "Template",
    "TemplateEngine",
    "atomic_write_text",
    "compile_template",
    "default_registry",
    "render_template",
    "write_output",
]
