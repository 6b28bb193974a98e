"""Fillplate - schema-gated template renderer.

Merges JSON/YAML data sources, prompts for missing required fields, and
renders Jinja2 templates with text-transform helpers.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .cli import main
from .pipeline import render_pipeline

__all__ = ["main", "render_pipeline"]
