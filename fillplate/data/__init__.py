"""Loading and merging of context data."""

from .loader import load_document, load_source, source_from_spec
from .merger import merge, merge_all
from .sources import environment_context, overrides_to_context, parse_override

__all__ = [
    "environment_context",
    "load_document",
    "load_source",
    "merge",
    "merge_all",
    "overrides_to_context",
    "parse_override",
    "source_from_spec",
]
