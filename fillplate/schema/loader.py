"""Build schema trees from structured documents."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..core.errors import ParseError
from ..core.models import DataSource, SchemaNode
from ..core.values import ContextValue
from ..data.loader import load_source

logger = logging.getLogger(__name__)


def schema_from_value(value: ContextValue, *, source: str = "<schema>") -> SchemaNode:
    """Validate a parsed document as a schema tree.

    Raises:
        ParseError: If the document does not describe a valid schema
    """
    if value is None:
        raise ParseError(source, "schema document is empty")
    try:
        return SchemaNode.model_validate(value)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ParseError(source, f"invalid schema: {problems}") from e


def load_schema(source: DataSource) -> SchemaNode:
    """Read, parse and validate a schema document."""
    schema = schema_from_value(load_source(source), source=source.name)
    logger.debug(f"Loaded schema {source.name} ({len(schema.properties)} top-level field(s))")
    return schema
