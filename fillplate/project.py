"""Project files that name the templates a directory can render."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from .core.errors import ParseError
from .core.models import DataFormat, ProjectConfig, RenderTarget
from .data.loader import load_document

logger = logging.getLogger(__name__)

PROJECT_FILE = "fillplate.yaml"


def load_project(path: Path) -> ProjectConfig:
    """Load a project file; relative paths inside it resolve against its directory.

    Raises:
        FileNotFoundError: If the file does not exist
        ParseError: If the file is malformed or does not describe a project
    """
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    fmt = DataFormat.from_suffix(path) or DataFormat.YAML
    document = load_document(path.read_bytes(), fmt, source=str(path))
    if not isinstance(document, dict):
        raise ParseError(str(path), "project file must be a mapping")

    try:
        project = ProjectConfig.model_validate(
            {**document, "root": path.resolve().parent}
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ParseError(str(path), f"invalid project: {problems}") from e

    logger.debug(f"Loaded project {path} with {len(project.templates)} template(s)")
    return project


def select_target(project: ProjectConfig, name: str | None) -> tuple[str, RenderTarget]:
    """Pick a render target by name, or the only one when no name is given.

    Raises:
        KeyError: If ``name`` is unknown, or no name is given and several exist
    """
    if name is None:
        if len(project.templates) == 1:
            return next(iter(project.templates.items()))
        raise KeyError(
            f"Project defines {len(project.templates)} templates; choose one of: "
            f"{', '.join(project.templates)}"
        )
    if name not in project.templates:
        raise KeyError(f"Unknown template {name!r}; choose one of: {', '.join(project.templates)}")
    return name, project.templates[name]
