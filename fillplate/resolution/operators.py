"""Operator channels the resolver can ask for missing values."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Mapping, Optional, Union

import typer

from ..core.models import PromptSpec
from ..core.values import ValueKind, format_value

logger = logging.getLogger(__name__)


class Operator:
    """Line-oriented request/response channel.

    ``ask`` returns one line of text, or None to decline the field.
    """

    def ask(self, spec: PromptSpec) -> Optional[str]:
        raise NotImplementedError

    def reject(self, spec: PromptSpec, reason: str) -> None:
        """Report that the last answer for ``spec`` was unusable."""
        logger.warning(f"Rejected answer for {spec.label}: {reason}")


def describe_expected(spec: PromptSpec) -> str:
    """Short hint of what an answer should look like."""
    if spec.choices:
        return f"choose 1-{len(spec.choices)}"
    if spec.kind is ValueKind.ARRAY:
        item = spec.item_kind.value if spec.item_kind else "value"
        return f"comma-separated {item}s"
    if spec.kind is ValueKind.OBJECT:
        return "YAML/JSON mapping"
    if spec.kind is ValueKind.BOOLEAN:
        return "yes/no"
    return spec.kind.value


class TerminalOperator(Operator):
    """Prompt on the controlling terminal."""

    def ask(self, spec: PromptSpec) -> Optional[str]:
        if spec.description:
            typer.echo(spec.description)
        if spec.choices:
            for index, choice in enumerate(spec.choices, start=1):
                typer.echo(f"  {index}) {format_value(choice)}")
        return typer.prompt(
            f"{spec.label} ({describe_expected(spec)})",
            default="" if spec.default is None else format_value(spec.default),
            show_default=spec.default is not None,
        )

    def reject(self, spec: PromptSpec, reason: str) -> None:
        typer.secho(f"Invalid value for {spec.label}: {reason}", err=True, fg="red")


class ScriptedOperator(Operator):
    """Answer from a fixed script; used for automation and tests.

    Answers are looked up by dotted path when a mapping is given, otherwise
    taken in order from the sequence. Every prompt is recorded in ``asked``.
    """

    def __init__(self, answers: Union[Mapping[str, str], Iterable[str]] = ()) -> None:
        if isinstance(answers, Mapping):
            self._by_path = dict(answers)
            self._queue: deque[str] = deque()
        else:
            self._by_path = {}
            self._queue = deque(answers)
        self.asked: list[PromptSpec] = []
        self.rejected: list[tuple[PromptSpec, str]] = []

    def ask(self, spec: PromptSpec) -> Optional[str]:
        self.asked.append(spec)
        if spec.label in self._by_path:
            return self._by_path[spec.label]
        if self._queue:
            return self._queue.popleft()
        return None

    def reject(self, spec: PromptSpec, reason: str) -> None:
        self.rejected.append((spec, reason))


class NonInteractiveOperator(Operator):
    """Decline every prompt so missing fields fail the run."""

    def ask(self, spec: PromptSpec) -> Optional[str]:
        logger.warning(f"Cannot prompt for {spec.label} in non-interactive mode")
        return None
