"""Schema documents and validation."""

from .loader import load_schema, schema_from_value
from .validator import validate

__all__ = ["load_schema", "schema_from_value", "validate"]
