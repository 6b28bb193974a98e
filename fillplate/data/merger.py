"""Deep merge of context values in source precedence order."""

from __future__ import annotations

import copy
from typing import Iterable

from ..core.values import ContextValue


def merge(base: ContextValue, overlay: ContextValue) -> ContextValue:
    """Merge ``overlay`` onto ``base`` and return a new tree.

    Objects merge key by key, sequences are replaced wholesale, and on any
    other conflict the overlay wins. None on either side yields the other.
    """
    if overlay is None:
        return copy.deepcopy(base)
    if base is None:
        return copy.deepcopy(overlay)
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = {key: copy.deepcopy(value) for key, value in base.items()}
        for key, value in overlay.items():
            merged[key] = merge(merged.get(key), value) if key in merged else copy.deepcopy(value)
        return merged
    return copy.deepcopy(overlay)


def merge_all(values: Iterable[ContextValue]) -> ContextValue:
    """Fold ``values`` left to right: the first is the base, later ones override."""
    result: ContextValue = None
    for value in values:
        result = merge(result, value)
    return result
