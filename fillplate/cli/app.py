"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from ..core.errors import FillplateError
from ..core.values import ContextValue
from ..data.sources import environment_context, overrides_to_context
from ..pipeline import build_engine, render_pipeline
from ..project import load_project, select_target
from ..resolution.operators import NonInteractiveOperator, TerminalOperator
from ..rendering.io import write_output
from ..settings import Settings, get_settings
from . import scaffold
from .parsers import parse_data_source, parse_file_mode, parse_override

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fillplate",
    help="Render templates from merged, schema-checked data, prompting for gaps.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool, settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="[%(levelname)s] %(message)s",
    )


def _pick_target_name(names: list[str], interactive: bool) -> Optional[str]:
    if len(names) == 1 or not interactive:
        return None
    for index, name in enumerate(names, start=1):
        typer.echo(f"  {index}) {name}")
    answer = typer.prompt("Template").strip()
    if answer.isdigit() and 1 <= int(answer) <= len(names):
        return names[int(answer) - 1]
    return answer


@app.command()
def render(
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Template file to render.",
            metavar="PATH",
        ),
    ] = None,
    project: Annotated[
        Optional[Path],
        typer.Option(
            "--project",
            "-p",
            help="Project file listing named templates (instead of --template).",
            metavar="FILE",
        ),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option(
            "--name",
            "-n",
            help="Template to render from the project file.",
            metavar="NAME",
        ),
    ] = None,
    schema: Annotated[
        Optional[str],
        typer.Option(
            "--schema",
            "-s",
            help="Schema document the context must satisfy.",
            metavar="[FMT:]PATH",
        ),
    ] = None,
    data: Annotated[
        list[str],
        typer.Option(
            "--data",
            "-d",
            help="Data document (json/yaml, '-' for stdin). Repeatable; later ones win.",
            metavar="[FMT:]PATH",
        ),
    ] = [],
    overrides: Annotated[
        list[str],
        typer.Option(
            "--set",
            help="Override a value (KEY.PATH=VALUE). Repeatable; applied last.",
            metavar="KEY=VALUE",
        ),
    ] = [],
    env_prefix: Annotated[
        str,
        typer.Option(
            "--env-prefix",
            help="Merge environment variables with this prefix (PREFIX_A__B=v -> a.b).",
            metavar="PREFIX",
        ),
    ] = "",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file ('-' or omitted for stdout).",
            metavar="PATH",
        ),
    ] = None,
    file_mode: Annotated[
        Optional[str],
        typer.Option(
            "--mode",
            help="Output file permissions in octal (default: 0644).",
            metavar="OCTAL",
        ),
    ] = None,
    interactive: Annotated[
        Optional[bool],
        typer.Option(
            "--interactive/--non-interactive",
            help="Prompt for missing required fields, or fail instead.",
        ),
    ] = None,
    strict: Annotated[
        Optional[bool],
        typer.Option(
            "--strict/--loose",
            help="Fail on undefined template variables instead of rendering them empty.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render a template against merged, schema-checked data."""
    updates: dict[str, Any] = {}
    if interactive is not None:
        updates["interactive"] = interactive
    if strict is not None:
        updates["strict"] = strict
    settings = get_settings().model_copy(update=updates)
    _configure_logging(verbose, settings)

    logger.debug("Starting fillplate")

    if (template is None) == (project is None):
        raise typer.BadParameter("Provide exactly one of --template or --project")

    mode = parse_file_mode(file_mode) if file_mode else settings.file_mode
    data_specs: list[tuple[str, Optional[Path]]] = []
    schema_spec: Optional[tuple[str, Optional[Path]]] = (schema, None) if schema else None

    try:
        if project is not None:
            config = load_project(project)
            if name is None:
                name = _pick_target_name(list(config.templates), settings.interactive)
            try:
                target_name, target = select_target(config, name)
            except KeyError as e:
                raise typer.BadParameter(e.args[0], param_hint="--name") from e
            logger.debug(f"Selected template {target_name!r} from {project}")

            template = config.resolve(target.template)
            data_specs.extend((spec, config.root) for spec in target.data)
            if schema_spec is None and target.schema_path is not None:
                schema_spec = (str(target.schema_path), config.root)
            if output is None and target.output is not None:
                output = config.resolve(target.output)

        if template is None:
            raise typer.BadParameter("No template selected", param_hint="--template")
        data_specs.extend((spec, None) for spec in data)
        sources = [
            parse_data_source(spec, settings.default_format, base)
            for spec, base in data_specs
        ]
        schema_source = (
            parse_data_source(schema_spec[0], settings.default_format, schema_spec[1])
            if schema_spec
            else None
        )

        extra: list[ContextValue] = []
        if env_prefix:
            extra.append(environment_context(env_prefix))
        if overrides:
            extra.append(overrides_to_context([parse_override(o) for o in overrides]))

        operator = TerminalOperator() if settings.interactive else NonInteractiveOperator()
        engine = build_engine(settings, search_path=template.parent)

        if not template.exists():
            raise FileNotFoundError(f"Template not found: {template}")
        rendered = render_pipeline(
            template.read_text(encoding="utf-8"),
            sources=sources,
            schema=schema_source,
            extra_context=extra,
            operator=operator,
            engine=engine,
            settings=settings,
            template_name=str(template),
        )
        write_output(rendered, output, mode=mode)
    except (FillplateError, OSError) as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    if output is not None and str(output) != "-":
        logger.info(f"Rendered {template} → {output}")


@app.command()
def init(
    directory: Annotated[
        Path,
        typer.Option(
            "--dir",
            help="Directory for the starter project.",
            metavar="DIR",
        ),
    ] = Path(".fillplate"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing starter files.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Write a starter project (project file, schema, defaults, template)."""
    _configure_logging(verbose, get_settings())

    try:
        written = scaffold.write_starter_project(directory, force=force)
    except OSError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    logger.info(f"Wrote {len(written)} file(s) to {directory}")
    typer.echo(f"Render it with: fillplate render --project {directory / 'fillplate.yaml'}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
