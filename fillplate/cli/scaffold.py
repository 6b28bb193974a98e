"""Starter project written by ``fillplate init``."""

from __future__ import annotations

import logging
from pathlib import Path

from ..project import PROJECT_FILE
from ..rendering.io import atomic_write_text

logger = logging.getLogger(__name__)

STARTER_FILES: dict[str, str] = {
    PROJECT_FILE: """\
templates:
  readme:
    description: Project README
    template: templates/README.md.j2
    schema: schema.yaml
    data:
      - defaults.yaml
""",
    "schema.yaml": """\
type: object
required: [project, author]
properties:
  project:
    type: object
    required: [name, license]
    properties:
      name:
        type: string
        description: Project name
      license:
        type: string
        enum: [MIT, Apache-2.0, BSD-3-Clause]
        default: MIT
      summary:
        type: string
  author:
    type: string
    description: Maintainer name
  tags:
    type: array
    items:
      type: string
""",
    "defaults.yaml": """\
project:
  license: MIT
tags: []
""",
    "templates/README.md.j2": """\
# {{ project.name }}

{{ project.summary }}

Package: `{{ project.name | snake }}`
Maintainer: {{ author }}
License: {{ project.license }}
{% if tags %}
Tags: {% for tag in tags %}`{{ tag }}` {% endfor %}

{% endif %}
""",
}


def write_starter_project(directory: Path, *, force: bool = False) -> list[Path]:
    """Write the starter files into ``directory``.

    Raises:
        FileExistsError: If a starter file already exists and ``force`` is off
    """
    targets = [directory / name for name in STARTER_FILES]
    if not force:
        existing = [str(path) for path in targets if path.exists()]
        if existing:
            raise FileExistsError(
                f"Refusing to overwrite existing file(s): {', '.join(existing)} (use --force)"
            )

    for path, content in zip(targets, STARTER_FILES.values()):
        atomic_write_text(path, content)
        logger.debug(f"Wrote {path}")
    return targets
