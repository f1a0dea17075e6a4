"""
Module: analysis.classifier

Purpose:
    Mastery classification of one question from its attempt statistics.
    Rules are evaluated in order and the first match wins:

        1. no attempts                       → UNSEEN
        2. success rate == 0                 → FAILED
        3. streak >= 3                       → MASTERED
        4. streak >= 2 and rate >= 0.5       → MASTERED
        5. rate >= 0.8 and attempts >= 2     → MASTERED
        6. streak >= 1 and rate >= 0.4       → IMPROVING
        7. rate >= 0.5                       → IMPROVING
        8. otherwise                         → STRUGGLING

Key Functions:
    - classify_question(): (attempts, rate, streak) → QuestionCategory

Used By:
    - analysis.index
"""

from __future__ import annotations

from cbt_toolkit.core.models import QuestionCategory


MASTERY_STREAK = 3
SOLID_STREAK = 2
MASTERY_RATE = 0.8
IMPROVING_STREAK_RATE = 0.4
PASSING_RATE = 0.5


def classify_question(total_attempts: int, success_rate: float, streak: int) -> QuestionCategory:
    """
    Classify a question by its attempt statistics.

    Args:
        total_attempts: Attempts that included the question
        success_rate: correct / total (ignored when total_attempts is 0)
        streak: Consecutive correct answers ending at the latest attempt

    Returns:
        QuestionCategory

    Example:
        >>> classify_question(4, 0.5, 2)
        <QuestionCategory.MASTERED: 'MASTERED'>
        >>> classify_question(4, 0.25, 1)
        <QuestionCategory.STRUGGLING: 'STRUGGLING'>
    """
    if total_attempts == 0:
        return QuestionCategory.UNSEEN
    if success_rate == 0:
        return QuestionCategory.FAILED
    if streak >= MASTERY_STREAK:
        return QuestionCategory.MASTERED
    if streak >= SOLID_STREAK and success_rate >= PASSING_RATE:
        return QuestionCategory.MASTERED
    if success_rate >= MASTERY_RATE and total_attempts >= 2:
        return QuestionCategory.MASTERED
    if streak >= 1 and success_rate >= IMPROVING_STREAK_RATE:
        return QuestionCategory.IMPROVING
    if success_rate >= PASSING_RATE:
        return QuestionCategory.IMPROVING
    return QuestionCategory.STRUGGLING
