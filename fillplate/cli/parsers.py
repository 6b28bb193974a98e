"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from ..core.models import DataFormat, DataSource
from ..core.values import KeyPath
from ..data.loader import source_from_spec
from ..data.sources import parse_override as _parse_override


def parse_data_source(
    value: str, default_format: DataFormat, base: Optional[Path] = None
) -> DataSource:
    """Parse a data source argument in format [FORMAT:]PATH."""
    try:
        return source_from_spec(value, default_format=default_format, base=base)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_override(value: str) -> tuple[KeyPath, Any]:
    """Parse an override argument in format KEY.PATH=VALUE."""
    try:
        return _parse_override(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e
