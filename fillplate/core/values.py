"""Context values, their kinds, and path helpers for walking value trees."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple, Union

ContextValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
PathSegment = Union[str, int]
KeyPath = Tuple[PathSegment, ...]

_SEGMENT_PATTERN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


class ValueKind(str, Enum):
    """The six shapes a context value can take."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """Return the runtime kind of a context value."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, so it has to be tested first.
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Not a context value: {type(value).__name__}")


def is_member(value: Any, choices: List[Any]) -> bool:
    """Enum membership that keeps kinds apart, so ``True`` is not ``1``."""
    kind = kind_of(value)
    return any(kind_of(choice) is kind and choice == value for choice in choices)


def format_value(value: Any) -> str:
    """Spell a value the way a JSON/YAML document would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def format_path(path: KeyPath) -> str:
    """Render a path as ``user.tags[0].name``."""
    out = ""
    for segment in path:
        if isinstance(segment, int):
            out += f"[{segment}]"
        else:
            out += f".{segment}" if out else segment
    return out or "<root>"


def parse_path(text: str) -> KeyPath:
    """Parse ``a.b[0].c`` into ``("a", "b", 0, "c")``.

    Raises:
        ValueError: If the text is not a well-formed path
    """
    segments: list[PathSegment] = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        if text[pos] == "." and segments:
            pos += 1
        match = _SEGMENT_PATTERN.match(text, pos)
        if not match:
            raise ValueError(f"Malformed path: {text!r}")
        key, index = match.groups()
        segments.append(int(index) if index is not None else key)
        pos = match.end()
    if not segments:
        raise ValueError("Path must not be empty")
    return tuple(segments)


def get_path(root: Any, path: KeyPath, default: Any = None) -> Any:
    """Look up ``path`` in ``root``, returning ``default`` when any step is missing."""
    current = root
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(current, list) or not -len(current) <= segment < len(current):
                return default
            current = current[segment]
        else:
            if not isinstance(current, Mapping) or segment not in current:
                return default
            current = current[segment]
    return current


def set_path(root: Any, path: KeyPath, value: Any) -> Any:
    """Write ``value`` at ``path`` inside ``root``, creating objects on the way.

    The containers along the path are modified in place; the (possibly new)
    root is returned so callers can start from ``None``. An index may address
    an existing element or append one past the end.

    Raises:
        TypeError: If a step meets a value of the wrong kind
        IndexError: If an index lies beyond the end of its list
    """
    if not path:
        return value

    head, rest = path[0], path[1:]
    if isinstance(head, int):
        if root is None:
            root = []
        if not isinstance(root, list):
            raise TypeError(f"Cannot index {kind_of(root).value} with [{head}]")
        if head > len(root):
            raise IndexError(f"Index [{head}] is past the end of a {len(root)}-item list")
        if head == len(root):
            root.append(None)
        root[head] = set_path(root[head], rest, value)
        return root

    if root is None:
        root = {}
    if not isinstance(root, dict):
        raise TypeError(f"Cannot set key {head!r} on {kind_of(root).value}")
    root[head] = set_path(root.get(head), rest, value)
    return root
