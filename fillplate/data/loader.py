"""Parse JSON/YAML documents into context values."""

from __future__ import annotations

import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Any, Union

import yaml

from ..core.errors import ParseError
from ..core.models import DataFormat, DataSource
from ..core.values import ContextValue

logger = logging.getLogger(__name__)


def load_document(
    raw: Union[bytes, str], fmt: DataFormat, *, source: str = "<input>"
) -> ContextValue:
    """Parse one structured document.

    Args:
        raw: Document bytes (UTF-8) or already-decoded text
        fmt: Declared encoding; content is never sniffed
        source: Name used in error messages

    Returns:
        The parsed tree, or None for empty input

    Raises:
        ParseError: If the document is malformed
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(source, f"invalid UTF-8: {e.reason}", position=e.start) from e
    else:
        text = raw

    if not text.strip():
        return None

    if fmt is DataFormat.JSON:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                source, e.msg, line=e.lineno, column=e.colno, position=e.pos
            ) from e
    else:
        try:
            parsed = yaml.safe_load(text)
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            message = e.problem or e.context or "malformed YAML"
            if mark is None:
                raise ParseError(source, message) from e
            raise ParseError(
                source,
                message,
                line=mark.line + 1,
                column=mark.column + 1,
                position=mark.index,
            ) from e
        except yaml.YAMLError as e:
            raise ParseError(source, str(e)) from e

    return _normalize(parsed)


def _normalize(value: Any) -> ContextValue:
    """Coerce parser output into plain context values."""
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_normalize(v) for v in value]
    if isinstance(value, (dt.date, dt.datetime, dt.time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def read_source(source: DataSource) -> bytes:
    """Return the raw bytes behind a data source."""
    if source.content is not None:
        return source.content
    if source.path is None:
        raise ValueError(f"Data source {source.name} has neither content nor a path")
    if str(source.path) == "-":
        return sys.stdin.buffer.read()
    if not source.path.exists():
        raise FileNotFoundError(f"Data source not found: {source.path}")
    return source.path.read_bytes()


def load_source(source: DataSource) -> ContextValue:
    """Read and parse a data source."""
    logger.debug(f"Loading {source.format.value} source: {source.name}")
    return load_document(read_source(source), source.format, source=source.name)


def source_from_spec(
    spec: str, *, default_format: DataFormat = DataFormat.YAML, base: Path | None = None
) -> DataSource:
    """Build a data source from ``[FORMAT:]PATH``.

    An explicit ``json:``/``yaml:`` prefix wins; otherwise the file extension
    decides, falling back to ``default_format``. ``-`` reads stdin.

    Raises:
        ValueError: If no path is given
    """
    fmt: DataFormat | None = None
    location = spec
    prefix, sep, rest = spec.partition(":")
    if sep and prefix.lower() in {f.value for f in DataFormat}:
        fmt = DataFormat(prefix.lower())
        location = rest
    if not location:
        raise ValueError(f"Data source has no path: {spec!r}")

    path = Path(location)
    if base is not None and location != "-" and not path.is_absolute():
        path = base / path
    if fmt is None:
        fmt = DataFormat.from_suffix(path) or default_format
    return DataSource.from_path(path, fmt)
