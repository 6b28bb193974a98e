"""Error taxonomy for the fillplate pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from .values import KeyPath, format_path

if TYPE_CHECKING:
    from .models import Violation


class FillplateError(Exception):
    """Base class for every error raised by the pipeline."""


class ParseError(FillplateError):
    """Raised when a data, schema or template source is malformed."""

    def __init__(
        self,
        source: str,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        position: int | None = None,
    ) -> None:
        self.source = source
        self.message = message
        self.line = line
        self.column = column
        self.position = position
        super().__init__(str(self))

    def __str__(self) -> str:
        where = self.source
        if self.line is not None:
            where += f":{self.line}"
            if self.column is not None:
                where += f":{self.column}"
        elif self.position is not None:
            where += f" (byte {self.position})"
        return f"{where}: {self.message}"


class ValidationFailed(FillplateError):
    """Raised when supplied data has the wrong type or an out-of-enum value."""

    def __init__(self, violations: Sequence[Violation]) -> None:
        self.violations = list(violations)
        details = "; ".join(v.describe() for v in self.violations)
        super().__init__(f"Context failed schema validation: {details}")


class UnresolvedRequiredFields(FillplateError):
    """Raised when required fields are still missing after a pass with no progress."""

    def __init__(self, paths: Iterable[KeyPath]) -> None:
        self.paths = list(paths)
        names = ", ".join(format_path(p) for p in self.paths)
        super().__init__(f"Required field(s) could not be resolved: {names}")


class UnknownHelper(FillplateError):
    """Raised at compile time when a template calls a helper that is not registered."""

    def __init__(self, names: Iterable[str], template: str) -> None:
        self.names = sorted(set(names))
        self.template = template
        super().__init__(
            f"Template {template} references unknown helper(s): {', '.join(self.names)}"
        )


class InvalidPattern(FillplateError):
    """Raised when a regex helper receives a pattern that does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regular expression {pattern!r}: {reason}")


class RenderError(FillplateError):
    """Raised for any other failure while evaluating a template."""

    def __init__(
        self, message: str, *, template: str | None = None, helper: str | None = None
    ) -> None:
        self.template = template
        self.helper = helper
        prefix = f"{template}: " if template else ""
        super().__init__(f"{prefix}{message}")
