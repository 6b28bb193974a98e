"""Template compilation and rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from jinja2 import (
    ChainableUndefined,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateSyntaxError,
    nodes,
)
from jinja2 import Template as JinjaTemplate

from ..core.errors import FillplateError, ParseError, RenderError, UnknownHelper
from ..core.values import ContextValue
from .helpers import HelperRegistry, default_registry

logger = logging.getLogger(__name__)

# Names Jinja2 binds implicitly inside macros and blocks.
_IMPLICIT_CALLABLES = frozenset({"caller", "super", "self", "varargs", "kwargs"})


@dataclass(frozen=True)
class Template:
    """A compiled template and the helpers it calls."""

    name: str
    source: str
    compiled: JinjaTemplate
    helpers: frozenset[str]


class TemplateEngine:
    """Jinja2 environment wired to a helper registry.

    Args:
        registry: Helpers exposed to templates (built-ins when omitted)
        strict: Fail on references to undefined context paths
        search_path: Directory used to resolve includes and extends
    """

    def __init__(
        self,
        registry: Optional[HelperRegistry] = None,
        *,
        strict: bool = False,
        search_path: Optional[Path] = None,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = True,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.env = Environment(
            loader=FileSystemLoader(str(search_path)) if search_path else None,
            undefined=StrictUndefined if strict else ChainableUndefined,
            autoescape=False,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=keep_trailing_newline,
        )
        self.registry.install(self.env)

    def compile(self, source: str, name: str = "<template>") -> Template:
        """Compile template source, rejecting unknown helpers up front.

        Raises:
            ParseError: If the template has a syntax error
            UnknownHelper: If it calls or filters through an unregistered name
        """
        try:
            ast = self.env.parse(source, name=name)
        except TemplateSyntaxError as e:
            raise ParseError(name, e.message or str(e), line=e.lineno) from e

        called, filtered = _referenced_names(ast)
        defined = _defined_names(ast)
        unknown = {
            n for n in called if n not in self.env.globals and n not in defined
        } | {n for n in filtered if n not in self.env.filters}
        if unknown:
            raise UnknownHelper(unknown, name)

        try:
            compiled = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise ParseError(name, e.message or str(e), line=e.lineno) from e

        helpers = frozenset(n for n in called | filtered if n in self.registry)
        logger.debug(f"Compiled template {name} (helpers: {sorted(helpers) or 'none'})")
        return Template(name=name, source=source, compiled=compiled, helpers=helpers)

    def render(self, template: Template, context: ContextValue) -> str:
        """Render a compiled template against a context."""
        return render_template(template, context)

    def load_template(self, template_path: Path) -> Template:
        """Read and compile a template file.

        Args:
            template_path: Path to the template file

        Returns:
            Compiled template
        """
        if not template_path.exists():
            raise FileNotFoundError(f"Template not found: {template_path}")
        return self.compile(template_path.read_text(encoding="utf-8"), str(template_path))


def _referenced_names(ast: nodes.Template) -> tuple[set[str], set[str]]:
    called = {
        call.node.name
        for call in ast.find_all(nodes.Call)
        if isinstance(call.node, nodes.Name)
    }
    filtered = {node.name for node in ast.find_all(nodes.Filter)}
    return called, filtered


def _defined_names(ast: nodes.Template) -> set[str]:
    defined = set(_IMPLICIT_CALLABLES)
    defined.update(macro.name for macro in ast.find_all(nodes.Macro))
    defined.update(
        name.name for name in ast.find_all(nodes.Name) if name.ctx in ("store", "param")
    )
    for node in ast.find_all(nodes.FromImport):
        for entry in node.names:
            defined.add(entry[1] if isinstance(entry, tuple) else entry)
    return defined


def compile_template(source: str, name: str = "<template>") -> Template:
    """Compile with the built-in helpers and default engine settings."""
    return TemplateEngine().compile(source, name)


def render_template(template: Template, context: ContextValue) -> str:
    """Render a compiled template against a context.

    A mapping context supplies the template variables; any other value is
    exposed as ``this``. The output is produced in full or not at all.

    Raises:
        RenderError: If evaluation fails
    """
    if context is None:
        variables: dict[str, Any] = {}
    elif isinstance(context, dict):
        variables = context
    else:
        variables = {"this": context}

    try:
        return template.compiled.render(variables)
    except RenderError as e:
        if e.template is None:
            raise RenderError(str(e), template=template.name, helper=e.helper) from e
        raise
    except FillplateError:
        raise
    except Exception as e:
        raise RenderError(str(e), template=template.name) from e
