"""Interactive resolution of missing required fields."""

from .operators import NonInteractiveOperator, Operator, ScriptedOperator, TerminalOperator
from .resolver import AnswerError, coerce_answer, resolve

__all__ = [
    "AnswerError",
    "NonInteractiveOperator",
    "Operator",
    "ScriptedOperator",
    "TerminalOperator",
    "coerce_answer",
    "resolve",
]
