"""Structural validation of a context against a schema."""

from __future__ import annotations

from typing import Any

from ..core.models import SchemaNode, Violation, ViolationKind
from ..core.values import ContextValue, KeyPath, ValueKind, is_member, kind_of


def validate(context: ContextValue, schema: SchemaNode) -> list[Violation]:
    """Return every violation of ``schema`` found in ``context``.

    The walk is depth-first in schema declaration order, so the result is
    stable across calls. The root is always treated as required. Keys the
    schema does not declare are ignored.
    """
    violations: list[Violation] = []
    if context is None:
        _visit_missing(schema, (), violations, required=True)
    else:
        _visit(context, schema, (), violations)
    return violations


def _visit(value: Any, node: SchemaNode, path: KeyPath, out: list[Violation]) -> None:
    if value is None:
        _visit_missing(node, path, out, required=node.required)
        return

    if kind_of(value) is not node.kind:
        out.append(
            Violation(path=path, kind=ViolationKind.TYPE_MISMATCH, expected=node, actual=value)
        )
        return

    if node.enum is not None and not is_member(value, node.enum):
        out.append(
            Violation(path=path, kind=ViolationKind.ENUM_VIOLATION, expected=node, actual=value)
        )
        return

    if node.kind is ValueKind.OBJECT:
        for name, child in node.properties.items():
            _visit(value.get(name), child, path + (name,), out)
    elif node.kind is ValueKind.ARRAY and node.items is not None:
        for index, element in enumerate(value):
            _visit(element, node.items, path + (index,), out)


def _visit_missing(
    node: SchemaNode, path: KeyPath, out: list[Violation], *, required: bool
) -> None:
    if not required:
        return
    # Report the required leaves below an absent object rather than the object.
    if node.kind is ValueKind.OBJECT and node.has_required_properties():
        for name, child in node.properties.items():
            _visit_missing(child, path + (name,), out, required=child.required)
        return
    out.append(Violation(path=path, kind=ViolationKind.MISSING_REQUIRED, expected=node))
