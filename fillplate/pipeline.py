"""End-to-end pipeline: compile, load, merge, resolve, render."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .core.models import DataSource, SchemaNode
from .core.values import ContextValue
from .data.loader import load_source
from .data.merger import merge_all
from .rendering.engine import TemplateEngine
from .rendering.helpers import HelperRegistry
from .resolution.operators import Operator
from .resolution.resolver import resolve
from .schema.loader import load_schema
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_engine(
    settings: Optional[Settings] = None,
    *,
    registry: Optional[HelperRegistry] = None,
    search_path: Optional[Path] = None,
) -> TemplateEngine:
    """Create a template engine configured from settings."""
    settings = settings or get_settings()
    return TemplateEngine(
        registry,
        strict=settings.strict,
        search_path=search_path,
        trim_blocks=settings.trim_blocks,
        lstrip_blocks=settings.lstrip_blocks,
        keep_trailing_newline=settings.keep_trailing_newline,
    )


def _contexts(
    sources: Sequence[DataSource], extra: Sequence[ContextValue]
) -> Iterable[ContextValue]:
    for source in sources:
        yield load_source(source)
    yield from extra


def render_pipeline(
    template_source: str,
    *,
    sources: Sequence[DataSource] = (),
    schema: Union[SchemaNode, DataSource, None] = None,
    extra_context: Sequence[ContextValue] = (),
    operator: Optional[Operator] = None,
    engine: Optional[TemplateEngine] = None,
    settings: Optional[Settings] = None,
    template_name: str = "<template>",
) -> str:
    """Render a template against merged, schema-checked data.

    The template is compiled before any source is read, so an unknown helper
    fails before data is loaded or the operator is prompted.

    Args:
        template_source: Jinja2 template text
        sources: Data documents in precedence order (later wins)
        schema: Schema tree or schema document; validation is skipped if None
        extra_context: Values merged after the documents (environment, overrides)
        operator: Channel for missing required fields
        engine: Template engine (built from settings when omitted)
        settings: Runtime settings (process settings when omitted)
        template_name: Name used in error messages

    Returns:
        The complete rendered text
    """
    settings = settings or get_settings()
    engine = engine or build_engine(settings)

    template = engine.compile(template_source, template_name)

    context = merge_all(_contexts(sources, extra_context))
    logger.debug(f"Merged {len(sources)} source(s) and {len(extra_context)} extra context(s)")

    if schema is not None:
        schema_node = load_schema(schema) if isinstance(schema, DataSource) else schema
        context = resolve(
            context,
            schema_node,
            operator,
            max_attempts=settings.max_answer_attempts,
        )

    rendered = engine.render(template, context)
    logger.debug(f"Rendered {template_name} ({len(rendered)} characters)")
    return rendered
