"""Domain models for schemas, violations, prompts and render targets."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .values import KeyPath, ValueKind, format_path, format_value, is_member, kind_of

_KIND_ALIASES = {
    "integer": ValueKind.NUMBER,
    "int": ValueKind.NUMBER,
    "float": ValueKind.NUMBER,
    "bool": ValueKind.BOOLEAN,
    "str": ValueKind.STRING,
    "text": ValueKind.STRING,
    "list": ValueKind.ARRAY,
    "sequence": ValueKind.ARRAY,
    "dict": ValueKind.OBJECT,
    "map": ValueKind.OBJECT,
    "mapping": ValueKind.OBJECT,
}


class DataFormat(str, Enum):
    """Encoding of a structured document."""

    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_suffix(cls, path: Path) -> Optional[DataFormat]:
        suffix = path.suffix.lower()
        if suffix == ".json":
            return cls.JSON
        if suffix in (".yaml", ".yml"):
            return cls.YAML
        return None


class DataSource(BaseModel):
    """A structured document to load, either from disk/stdin or from memory."""

    name: str = Field(..., description="Display name used in error messages")
    format: DataFormat = Field(..., description="Declared encoding")
    path: Optional[Path] = Field(default=None, description="File to read; '-' is stdin")
    content: Optional[bytes] = Field(default=None, description="In-memory document")

    @model_validator(mode="after")
    def _one_origin(self) -> DataSource:
        if (self.path is None) == (self.content is None):
            raise ValueError("A data source needs exactly one of 'path' or 'content'")
        return self

    @classmethod
    def from_path(cls, path: Path, fmt: DataFormat) -> DataSource:
        return cls(name=str(path), format=fmt, path=path)

    @classmethod
    def from_text(
        cls, text: Union[str, bytes], fmt: DataFormat, name: str = "<memory>"
    ) -> DataSource:
        raw = text.encode("utf-8") if isinstance(text, str) else text
        return cls(name=name, format=fmt, content=raw)


class SchemaNode(BaseModel):
    """Expected shape of one context value.

    Accepts ``kind`` or the JSON-Schema spelling ``type``, a per-node
    ``required: true`` flag or a parent-level ``required: [names]`` list, and a
    bare kind string as shorthand for a property (``title: string``).
    """

    model_config = ConfigDict(extra="ignore")

    kind: ValueKind
    required: bool = False
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    items: Optional[SchemaNode] = None
    enum: Optional[list[Any]] = None
    description: Optional[str] = None
    default: Any = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, str):
            data = {"kind": data}
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if "kind" not in data and "type" in data:
            data["kind"] = data.pop("type")
        if "kind" not in data:
            if "properties" in data:
                data["kind"] = ValueKind.OBJECT
            elif "items" in data:
                data["kind"] = ValueKind.ARRAY
        kind = data.get("kind")
        if isinstance(kind, str):
            kind = kind.strip().lower()
            data["kind"] = _KIND_ALIASES.get(kind, kind)

        required = data.get("required")
        if isinstance(required, list):
            properties = dict(data.get("properties") or {})
            for name in required:
                if name not in properties:
                    raise ValueError(f"Required property {name!r} is not declared")
                properties[name] = _mark_required(properties[name])
            data["properties"] = properties
            data["required"] = False
        return data

    @model_validator(mode="after")
    def _check_shape(self) -> SchemaNode:
        if self.properties and self.kind is not ValueKind.OBJECT:
            raise ValueError(f"'properties' is only valid for objects, not {self.kind.value}")
        if self.items is not None and self.kind is not ValueKind.ARRAY:
            raise ValueError(f"'items' is only valid for arrays, not {self.kind.value}")
        if self.enum is not None and not self.enum:
            raise ValueError("'enum' must list at least one value")
        if self.default is not None:
            if kind_of(self.default) is not self.kind:
                raise ValueError(
                    f"default {format_value(self.default)} is not a {self.kind.value}"
                )
            if self.enum is not None and not is_member(self.default, self.enum):
                raise ValueError(
                    f"default {format_value(self.default)} is not one of "
                    f"{', '.join(format_value(c) for c in self.enum)}"
                )
        return self

    def has_required_properties(self) -> bool:
        return any(child.required for child in self.properties.values())


def _mark_required(node: Any) -> Any:
    if isinstance(node, SchemaNode):
        return node.model_copy(update={"required": True})
    if isinstance(node, str):
        return {"kind": node, "required": True}
    if isinstance(node, dict):
        return {**node, "required": True}
    return node


class ViolationKind(str, Enum):
    MISSING_REQUIRED = "missing_required"
    TYPE_MISMATCH = "type_mismatch"
    ENUM_VIOLATION = "enum_violation"


class Violation(BaseModel):
    """A single schema-conformance failure at one context path."""

    model_config = ConfigDict(frozen=True)

    path: tuple[Union[str, int], ...]
    kind: ViolationKind
    expected: SchemaNode
    actual: Any = None

    def describe(self) -> str:
        where = format_path(self.path)
        if self.kind is ViolationKind.MISSING_REQUIRED:
            return f"{where}: missing required {self.expected.kind.value}"
        if self.kind is ViolationKind.TYPE_MISMATCH:
            return (
                f"{where}: expected {self.expected.kind.value}, "
                f"got {kind_of(self.actual).value}"
            )
        return f"{where}: {self.actual!r} is not one of {self.expected.enum!r}"


class PromptSpec(BaseModel):
    """What the operator is asked for to fill one missing required field."""

    model_config = ConfigDict(frozen=True)

    path: tuple[Union[str, int], ...]
    kind: ValueKind
    choices: Optional[list[Any]] = None
    item_kind: Optional[ValueKind] = None
    description: Optional[str] = None
    default: Any = None

    @classmethod
    def from_violation(cls, violation: Violation) -> PromptSpec:
        if violation.kind is not ViolationKind.MISSING_REQUIRED:
            raise ValueError(f"Cannot prompt for a {violation.kind.value} violation")
        node = violation.expected
        return cls(
            path=violation.path,
            kind=node.kind,
            choices=node.enum,
            item_kind=node.items.kind if node.items is not None else None,
            description=node.description,
            default=node.default,
        )

    @property
    def label(self) -> str:
        return format_path(self.path)


class RenderTarget(BaseModel):
    """A named template in a project file."""

    model_config = ConfigDict(populate_by_name=True)

    template: Path = Field(..., description="Template file path")
    schema_path: Optional[Path] = Field(
        default=None, alias="schema", description="Schema document path"
    )
    data: list[str] = Field(
        default_factory=list, description="Data sources in precedence order ([FMT:]PATH)"
    )
    output: Optional[Path] = Field(default=None, description="Output file path")
    description: Optional[str] = None


class ProjectConfig(BaseModel):
    """A project file listing the templates that can be rendered."""

    templates: dict[str, RenderTarget] = Field(
        ..., min_length=1, description="Render targets by name"
    )
    root: Path = Field(
        default_factory=Path.cwd, description="Base directory for relative paths"
    )

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path


__all__ = [
    "DataFormat",
    "DataSource",
    "KeyPath",
    "ProjectConfig",
    "PromptSpec",
    "RenderTarget",
    "SchemaNode",
    "Violation",
    "ViolationKind",
]
