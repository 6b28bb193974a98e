"""Core types shared by every pipeline stage."""

from .errors import (
    FillplateError,
    InvalidPattern,
    ParseError,
    RenderError,
    UnknownHelper,
    UnresolvedRequiredFields,
    ValidationFailed,
)
from .models import (
    DataFormat,
    DataSource,
    ProjectConfig,
    PromptSpec,
    RenderTarget,
    SchemaNode,
    Violation,
    ViolationKind,
)
from .values import (
    ContextValue,
    KeyPath,
    ValueKind,
    format_path,
    get_path,
    kind_of,
    parse_path,
    set_path,
)

__all__ = [
    "ContextValue",
    "DataFormat",
    "DataSource",
    "FillplateError",
    "InvalidPattern",
    "KeyPath",
    "ParseError",
    "ProjectConfig",
    "PromptSpec",
    "RenderError",
    "RenderTarget",
    "SchemaNode",
    "UnknownHelper",
    "UnresolvedRequiredFields",
    "ValidationFailed",
    "ValueKind",
    "Violation",
    "ViolationKind",
    "format_path",
    "get_path",
    "kind_of",
    "parse_path",
    "set_path",
]
