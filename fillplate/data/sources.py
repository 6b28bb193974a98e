"""Context sources that do not come from documents: environment and overrides."""

from __future__ import annotations

import logging
import math
import os
import re
from typing import Any, Iterable, Mapping

from ..core.errors import ParseError
from ..core.values import ContextValue, KeyPath, format_path, parse_path, set_path

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[-+]?\d+")
_FLOAT_PATTERN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_TRUTHY = {"true", "1", "yes", "on", "y"}
_FALSY = {"false", "0", "no", "off", "n"}


def parse_bool(value: str) -> bool:
    """Parse a yes/no style string.

    Raises:
        ValueError: If the value is not a recognised boolean
    """
    value_lower = value.strip().lower()
    if value_lower in _TRUTHY:
        return True
    if value_lower in _FALSY:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def coerce_value(value: str) -> bool | int | float | str:
    """Type a raw string the way a YAML scalar would read.

    ``true``/``false`` become booleans and numerals (``+3``, ``.5``, ``1e3``)
    become numbers; anything else, including numerals too large for a float,
    stays a string.
    """
    text = value.strip()
    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INT_PATTERN.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's integer digit limit.
            return value
    if _FLOAT_PATTERN.fullmatch(text):
        number = float(text)
        return number if math.isfinite(number) else value
    return value


def parse_csv_list(raw: str) -> list[str]:
    """Split a comma-separated string into stripped, non-empty items."""
    if not raw.strip():
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def environment_context(
    prefix: str, environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Collect prefixed environment variables into a nested context.

    ``APP_DB__HOST=db`` with prefix ``APP_`` becomes ``{"db": {"host": "db"}}``.

    Args:
        prefix: Variable prefix to match and strip
        environ: Variables to read (defaults to ``os.environ``)

    Returns:
        Nested mapping with lowercased keys and coerced values
    """
    environ = os.environ if environ is None else environ
    context: dict[str, Any] = {}
    for name in sorted(environ):
        if not name.startswith(prefix) or name == prefix:
            continue
        segments = tuple(
            part for part in name[len(prefix):].lower().split("__") if part
        )
        if not segments:
            continue
        try:
            context = set_path(context, segments, coerce_value(environ[name]))
        except TypeError as e:
            raise ParseError("environment", f"{name} conflicts with another variable: {e}") from e

    logger.debug(f"Collected {len(context)} top-level key(s) from {prefix}* variables")
    return context


def parse_override(text: str) -> tuple[KeyPath, bool | int | float | str]:
    """Parse ``a.b[0].c=value`` into a key path and a coerced value.

    Raises:
        ValueError: If the text is not ``KEY=VALUE`` or the key is malformed
    """
    if "=" not in text:
        raise ValueError(f"Override must be KEY=VALUE, got: {text!r}")
    key, value = text.split("=", 1)
    try:
        path = parse_path(key)
    except ValueError as e:
        raise ValueError(f"Malformed override key: {key!r}") from e
    if isinstance(path[0], int):
        raise ValueError(f"Override key must start with a name: {key!r}")
    return path, coerce_value(value)


def overrides_to_context(
    overrides: Iterable[tuple[KeyPath, Any]],
) -> ContextValue:
    """Fold parsed overrides into a nested mapping; later ones win.

    Indexed keys build lists in order (``tags[0]``, then ``tags[1]``). A list
    built here replaces the whole list from the data documents when merged.
    """
    context: ContextValue = None
    for path, value in overrides:
        try:
            context = set_path(context, path, value)
        except TypeError as e:
            raise ParseError(
                "overrides", f"{format_path(path)} conflicts with an earlier override: {e}"
            ) from e
        except IndexError as e:
            raise ParseError("overrides", f"{format_path(path)}: {e}") from e
    return context
