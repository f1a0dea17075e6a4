"""
Module: parsing.ranges

Purpose:
    Parse ``exam-range`` expressions and restrict a question list to the
    requested display orders.

    Grammar: comma-separated tokens, each ``N`` or ``N-M`` (1-based,
    inclusive). Problems are reported as messages rather than raised so the
    caller can offer to run the full exam instead.

Key Functions:
    - parse_exam_range(): Expression → RangeSelection
    - apply_exam_range(): Filter questions by a range expression
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from cbt_toolkit.core.models import Question


_SINGLE_RE = re.compile(r"^(\d+)$")
_SPAN_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


@dataclass(frozen=True)
class RangeSelection:
    """
    Parsed range expression.

    Attributes:
        orders: Selected display orders, ascending, no duplicates
        errors: Validation messages; a selection with errors must not be used
    """

    orders: tuple[int, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors and bool(self.orders)


def parse_exam_range(expression: str, question_count: int) -> RangeSelection:
    """
    Parse a range expression against a quiz of ``question_count`` questions.

    Args:
        expression: e.g. ``"1-10, 15"``
        question_count: Number of questions in the quiz

    Returns:
        RangeSelection with the selected orders and any errors

    Example:
        >>> parse_exam_range("3, 1-2", 5).orders
        (1, 2, 3)
        >>> parse_exam_range("4-9", 5).errors
        ('Question 9 does not exist (the quiz has 5 questions).',)
    """
    selected: set[int] = set()
    errors: list[str] = []

    tokens = [token.strip() for token in expression.split(",") if token.strip()]
    for token in tokens:
        single = _SINGLE_RE.match(token)
        span = _SPAN_RE.match(token)
        if single:
            start = end = int(single.group(1))
        elif span:
            start, end = int(span.group(1)), int(span.group(2))
        else:
            errors.append(f"'{token}' is not a question number or range.")
            continue

        if start < 1:
            errors.append(f"Question numbers start at 1 (got {start}).")
            continue
        if start > end:
            errors.append(f"Range '{token}' starts after it ends.")
            continue
        if end > question_count:
            errors.append(
                f"Question {end} does not exist (the quiz has {question_count} questions)."
            )
            continue
        selected.update(range(start, end + 1))

    if not selected and not errors:
        errors.append("The exam range does not select any questions.")

    return RangeSelection(orders=tuple(sorted(selected)), errors=tuple(errors))


def apply_exam_range(
    questions: Sequence[Question],
    expression: str,
) -> tuple[tuple[Question, ...], tuple[str, ...]]:
    """
    Restrict questions to a range expression.

    Args:
        questions: Complete question list (orders 1..N)
        expression: Range expression

    Returns:
        ``(selected, errors)``. When errors is non-empty, ``selected`` is
        the complete list unchanged.
    """
    selection = parse_exam_range(expression, len(questions))
    if not selection.is_valid:
        return tuple(questions), selection.errors

    wanted = set(selection.orders)
    return tuple(q for q in questions if q.order in wanted), ()
