"""Fill missing required fields by asking an operator until the schema is met."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Optional

import yaml

from ..core.errors import UnresolvedRequiredFields, ValidationFailed
from ..core.models import PromptSpec, SchemaNode, ViolationKind
from ..core.values import ContextValue, ValueKind, format_value, is_member, set_path
from ..data.sources import coerce_value, parse_bool, parse_csv_list
from ..schema.validator import validate
from .operators import NonInteractiveOperator, Operator

logger = logging.getLogger(__name__)

_DECLINED = object()


class AnswerError(ValueError):
    """Raised when an operator answer cannot be turned into the expected kind."""


def _require_text(text: str) -> str:
    if not text:
        raise AnswerError("a value is required")
    return text


def _to_number(text: str) -> int | float:
    value = coerce_value(_require_text(text))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AnswerError(f"{text!r} is not a number")
    return value


def _to_boolean(text: str) -> bool:
    try:
        return parse_bool(_require_text(text))
    except ValueError as e:
        raise AnswerError(str(e)) from e


def _to_string(text: str) -> str:
    return _require_text(text)


def _to_structure(text: str, expected: type) -> Any:
    try:
        value = yaml.safe_load(text) if text else None
    except yaml.YAMLError as e:
        raise AnswerError(f"not valid YAML/JSON: {e}") from e
    if value is None:
        return expected()
    if not isinstance(value, expected):
        raise AnswerError(f"expected a {'mapping' if expected is dict else 'list'}")
    return value


_SCALARS: dict[ValueKind, Callable[[str], Any]] = {
    ValueKind.STRING: _to_string,
    ValueKind.NUMBER: _to_number,
    ValueKind.BOOLEAN: _to_boolean,
}


def _as_array(text: str, spec: PromptSpec) -> list[Any]:
    item_kind = spec.item_kind or ValueKind.STRING
    if item_kind in (ValueKind.OBJECT, ValueKind.ARRAY):
        return _to_structure(text, list)
    coerce = _SCALARS.get(item_kind, _to_string)
    return [coerce(item) for item in parse_csv_list(text)]


def _as_object(text: str, spec: PromptSpec) -> dict[str, Any]:
    return _to_structure(text, dict)


def _as_null(text: str, spec: PromptSpec) -> None:
    raise AnswerError("null fields cannot be supplied interactively")


_STRATEGIES: dict[ValueKind, Callable[[str, PromptSpec], Any]] = {
    ValueKind.STRING: lambda text, spec: _to_string(text),
    ValueKind.NUMBER: lambda text, spec: _to_number(text),
    ValueKind.BOOLEAN: lambda text, spec: _to_boolean(text),
    ValueKind.ARRAY: _as_array,
    ValueKind.OBJECT: _as_object,
    ValueKind.NULL: _as_null,
}


def _choose(text: str, spec: PromptSpec) -> Any:
    choices = spec.choices or []
    try:
        value = _STRATEGIES[spec.kind](text, spec)
    except AnswerError:
        pass
    else:
        if is_member(value, choices):
            return value
    if text.isdigit() and 1 <= int(text) <= len(choices):
        return choices[int(text) - 1]
    raise AnswerError(
        f"{text!r} is not one of {', '.join(format_value(c) for c in choices)}"
    )


def coerce_answer(spec: PromptSpec, raw: str) -> Any:
    """Turn one line of operator input into a value of the expected kind.

    Enum answers are read with the field's own kind, so ``true`` selects the
    boolean choice; a 1-based index into the choices is accepted as well.

    Raises:
        AnswerError: If the answer does not fit the field
    """
    text = raw.strip()
    if not text and spec.default is not None:
        default = copy.deepcopy(spec.default)
        if spec.choices and not is_member(default, spec.choices):
            raise AnswerError(f"default {format_value(default)} is not an allowed choice")
        return default
    if spec.choices:
        return _choose(text, spec)
    return _STRATEGIES[spec.kind](text, spec)


def _ask(operator: Operator, spec: PromptSpec, max_attempts: int) -> Any:
    for attempt in range(1, max_attempts + 1):
        raw = operator.ask(spec)
        if raw is None:
            return _DECLINED
        try:
            return coerce_answer(spec, raw)
        except AnswerError as e:
            logger.debug(f"Answer {attempt}/{max_attempts} for {spec.label} rejected: {e}")
            operator.reject(spec, str(e))
    return _DECLINED


def resolve(
    context: ContextValue,
    schema: SchemaNode,
    operator: Optional[Operator] = None,
    *,
    max_attempts: int = 3,
) -> ContextValue:
    """Validate ``context`` and prompt for missing required fields until it conforms.

    Args:
        context: Merged context; it is copied, never modified
        schema: Schema the context must satisfy
        operator: Channel used to ask for values (declines everything if omitted)
        max_attempts: Tries per field before an unusable answer counts as declined

    Returns:
        A new context with no remaining violations

    Raises:
        ValidationFailed: If the context has type or enum violations
        UnresolvedRequiredFields: If a pass makes no progress on missing fields
    """
    operator = operator if operator is not None else NonInteractiveOperator()
    resolved = copy.deepcopy(context)
    previous: Optional[set] = None

    while True:
        violations = validate(resolved, schema)
        fatal = [v for v in violations if v.kind is not ViolationKind.MISSING_REQUIRED]
        if fatal:
            raise ValidationFailed(fatal)
        if not violations:
            return resolved

        paths = [v.path for v in violations]
        if previous is not None and set(paths) == previous:
            raise UnresolvedRequiredFields(paths)
        previous = set(paths)

        logger.debug(f"Resolving {len(violations)} missing required field(s)")
        for violation in violations:
            spec = PromptSpec.from_violation(violation)
            value = _ask(operator, spec, max_attempts)
            if value is _DECLINED:
                continue
            resolved = set_path(resolved, violation.path, value)
