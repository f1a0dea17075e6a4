"""
Module: performance

Purpose:
    Per-question performance records and the adaptive selection result.
    A QuestionPerformance is a cache: it is always re-derivable by replaying
    the attempt history against the current question set.

Key Classes:
    - QuestionCategory: UNSEEN / FAILED / STRUGGLING / IMPROVING / MASTERED
    - QuestionPerformance: Aggregate stats for one question
    - PerformanceSummary: Category counts across an index
    - AdaptiveSelection: Outcome of one adaptive selection run

Dependencies:
    - dataclasses (std)
    - .questions.Question

Used By:
    - analysis.classifier, analysis.index, analysis.selector
    - core.utils.serialization (performance codec)
    - ledger.performance_store
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .questions import Question


NEVER_ATTEMPTED = -1.0
"""Success-rate sentinel for a question with no attempts (distinct from 0)."""


class QuestionCategory(str, Enum):
    """Mastery classification of one question."""
    UNSEEN = "UNSEEN"
    FAILED = "FAILED"
    STRUGGLING = "STRUGGLING"
    IMPROVING = "IMPROVING"
    MASTERED = "MASTERED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class QuestionPerformance:
    """
    Aggregate attempt statistics for one question (immutable).

    Attributes:
        question_id: Question id
        question_order: Display order of the question
        total_attempts: Attempts that included this question
        correct_count: Correct attempts
        incorrect_count: Answered but wrong
        unanswered_count: Left unanswered
        success_rate: correct_count / total_attempts, or NEVER_ATTEMPTED
        last_attempt_correct: Correctness in the most recent attempt
        last_attempt_timestamp: Timestamp (ms) of the most recent attempt, 0 if none
        streak: Consecutive correct answers ending at the most recent attempt
        category: Mastery classification

    Invariants:
        - correct_count + incorrect_count + unanswered_count == total_attempts
        - success_rate == NEVER_ATTEMPTED iff total_attempts == 0
    """

    question_id: str
    question_order: int = 0
    total_attempts: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    unanswered_count: int = 0
    success_rate: float = NEVER_ATTEMPTED
    last_attempt_correct: bool = False
    last_attempt_timestamp: int = 0
    streak: int = 0
    category: QuestionCategory = QuestionCategory.UNSEEN

    @classmethod
    def unseen(cls, question: Question) -> QuestionPerformance:
        """Seed record for a question with no history."""
        return cls(question_id=question.id, question_order=question.order)

    @property
    def has_attempts(self) -> bool:
        return self.total_attempts > 0

    @property
    def is_mastered(self) -> bool:
        return self.category == QuestionCategory.MASTERED


PerformanceIndex = Dict[str, QuestionPerformance]


@dataclass(frozen=True)
class PerformanceSummary:
    """Category counts across a performance index."""

    mastered: int = 0
    improving: int = 0
    struggling: int = 0
    failed: int = 0
    unseen: int = 0

    @property
    def total(self) -> int:
        return self.mastered + self.improving + self.struggling + self.failed + self.unseen

    @property
    def mastery_percent(self) -> int:
        """Share of mastered questions, rounded to a whole percent."""
        if self.total == 0:
            return 0
        return round(self.mastered / self.total * 100)


@dataclass(frozen=True)
class AdaptiveSelection:
    """
    Result of an adaptive re-study selection.

    Attributes:
        questions: Selected questions, shuffled
        improvable_count: Non-mastered questions included
        mastered_count: Mastered questions included for reinforcement
            (when all_mastered is set: the number of mastered questions)
        all_mastered: Every question is mastered; nothing selected
        no_history: No question has ever been attempted; nothing selected
    """

    questions: tuple[Question, ...] = ()
    improvable_count: int = 0
    mastered_count: int = 0
    all_mastered: bool = False
    no_history: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.questions
