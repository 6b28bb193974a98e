"""Text-transform helpers callable from templates."""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

from jinja2 import Environment, pass_context
from jinja2.runtime import Context

from ..core.errors import FillplateError, InvalidPattern, RenderError
from ..core.values import get_path, parse_path

logger = logging.getLogger(__name__)

# Letter and digit runs; underscores and punctuation separate words.
_RUN_PATTERN = re.compile(r"[^\W_]+")


@dataclass(frozen=True)
class Helper:
    """A named helper.

    ``func`` receives string arguments; when ``takes_context`` is set it also
    gets a read-only view of the render context as the keyword ``context``.
    Single-argument helpers can be installed as filters too.
    """

    name: str
    func: Callable[..., str]
    takes_context: bool = False
    as_filter: bool = False


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPattern(pattern, str(e)) from e


def regex_match(pattern: str, text: str) -> str:
    """Return the first match of ``pattern`` in ``text``, or an empty string."""
    match = _compile(pattern).search(text)
    return match.group(0) if match else ""


def regex_extract(pattern: str, text: str, group: str = "1") -> str:
    """Return one capture group of the first match, by number or name."""
    compiled = _compile(pattern)
    match = compiled.search(text)
    if not match:
        return ""
    key: int | str = int(group) if group.isdigit() else group
    try:
        return match.group(key) or ""
    except IndexError as e:
        raise InvalidPattern(pattern, f"no group {group!r}: {e}") from e


def regex_replace(pattern: str, replacement: str, text: str) -> str:
    """Replace every non-overlapping match of ``pattern`` in ``text``."""
    compiled = _compile(pattern)
    try:
        return compiled.sub(replacement, text)
    except (re.error, IndexError) as e:
        raise InvalidPattern(pattern, f"bad replacement {replacement!r}: {e}") from e


def _is_boundary(prev: str, cur: str, nxt: str) -> bool:
    if prev.isdigit() != cur.isdigit():
        return True
    if prev.islower() and cur.isupper():
        return True
    # "HTTPServer": the last capital of an acronym starts the next word.
    return prev.isupper() and cur.isupper() and nxt.islower()


def _split_run(run: str) -> list[str]:
    words = []
    start = 0
    for i in range(1, len(run)):
        nxt = run[i + 1] if i + 1 < len(run) else ""
        if _is_boundary(run[i - 1], run[i], nxt):
            words.append(run[start:i])
            start = i
    words.append(run[start:])
    return words


def _words(text: str) -> list[str]:
    return [word for run in _RUN_PATTERN.findall(text) for word in _split_run(run)]


def upper(text: str) -> str:
    return text.upper()


def lower(text: str) -> str:
    return text.lower()


def trim(text: str) -> str:
    return text.strip()


def snake(text: str) -> str:
    return "_".join(word.lower() for word in _words(text))


def kebab(text: str) -> str:
    return "-".join(word.lower() for word in _words(text))


def pascal(text: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(text))


def camel(text: str) -> str:
    converted = pascal(text)
    return converted[:1].lower() + converted[1:]


def lookup(path: str, *, context: Mapping[str, Any]) -> str:
    """Read a dotted/indexed path from the render context."""
    try:
        key_path = parse_path(path)
    except ValueError as e:
        raise RenderError(str(e), helper="lookup") from e
    value = get_path(context, key_path)
    return "" if value is None else str(value)


def _to_argument(value: Any) -> str:
    # str() on StrictUndefined raises, which surfaces as a render error.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HelperRegistry:
    """Named helpers available to templates."""

    def __init__(self) -> None:
        self._helpers: dict[str, Helper] = {}

    def register(
        self,
        name: str,
        func: Callable[..., str],
        *,
        takes_context: bool = False,
        as_filter: bool = False,
    ) -> None:
        if not name.isidentifier():
            raise ValueError(f"Helper name must be an identifier: {name!r}")
        if name in self._helpers:
            logger.debug(f"Replacing helper: {name}")
        self._helpers[name] = Helper(name, func, takes_context, as_filter)

    def __contains__(self, name: object) -> bool:
        return name in self._helpers

    def __iter__(self) -> Iterator[Helper]:
        return iter(self._helpers.values())

    def __len__(self) -> int:
        return len(self._helpers)

    def get(self, name: str) -> Helper:
        return self._helpers[name]

    def install(self, env: Environment) -> None:
        """Expose every helper as a Jinja2 global (and filter where flagged)."""
        for helper in self:
            bound = _bind(helper)
            env.globals[helper.name] = bound
            if helper.as_filter:
                env.filters[helper.name] = bound


def _bind(helper: Helper) -> Callable[..., str]:
    def invoke(args: tuple[Any, ...], context: Mapping[str, Any] | None) -> str:
        arguments = [_to_argument(arg) for arg in args]
        try:
            if context is not None:
                result = helper.func(*arguments, context=context)
            else:
                result = helper.func(*arguments)
        except FillplateError:
            raise
        except Exception as e:
            raise RenderError(f"helper {helper.name!r} failed: {e}", helper=helper.name) from e
        return _to_argument(result)

    if helper.takes_context:

        @pass_context
        def call_with_context(ctx: Context, *args: Any) -> str:
            return invoke(args, MappingProxyType(ctx.get_all()))

        return call_with_context

    def call(*args: Any) -> str:
        return invoke(args, None)

    return call


def default_registry() -> HelperRegistry:
    """Return a fresh registry holding the built-in helpers."""
    registry = HelperRegistry()
    registry.register("regex_match", regex_match)
    registry.register("regex_extract", regex_extract)
    registry.register("regex_replace", regex_replace)
    for func in (upper, lower, trim, snake, kebab, pascal, camel):
        registry.register(func.__name__, func, as_filter=True)
    registry.register("lookup", lookup, takes_context=True)
    return registry
