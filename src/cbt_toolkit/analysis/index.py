"""
Module: analysis.index

Purpose:
    Build the per-question performance index by replaying the complete
    attempt history against the current question set. The index is always
    rebuilt from scratch, never merged, so it cannot drift from the ledger.

Algorithm:
    1. Seed an UNSEEN record for every current question
    2. Replay attempts oldest first; results for questions that no longer
       exist are ignored
    3. Classify every record once replay is complete

Key Functions:
    - build_performance_index(): History + questions → PerformanceIndex
    - summarize_performance(): Category counts for an index

Dependencies:
    - analysis.classifier: Mastery rules

Used By:
    - controller.StudyController
    - cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

from cbt_toolkit.core.models import (
    NEVER_ATTEMPTED,
    ExamResult,
    PerformanceIndex,
    PerformanceSummary,
    Question,
    QuestionCategory,
    QuestionPerformance,
    QuestionResult,
)

from .classifier import classify_question

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    """Mutable running totals for one question during replay."""

    question_id: str
    order: int
    total: int = 0
    correct: int = 0
    incorrect: int = 0
    unanswered: int = 0
    success_rate: float = NEVER_ATTEMPTED
    last_correct: bool = False
    last_timestamp: int = 0
    streak: int = 0

    def record(self, result: QuestionResult, timestamp: int) -> None:
        self.total += 1
        if result.is_correct:
            self.correct += 1
            self.streak += 1
        elif result.is_unanswered:
            self.unanswered += 1
            self.streak = 0
        else:
            self.incorrect += 1
            self.streak = 0

        self.last_correct = result.is_correct
        self.last_timestamp = timestamp
        self.success_rate = self.correct / self.total

    def freeze(self) -> QuestionPerformance:
        return QuestionPerformance(
            question_id=self.question_id,
            question_order=self.order,
            total_attempts=self.total,
            correct_count=self.correct,
            incorrect_count=self.incorrect,
            unanswered_count=self.unanswered,
            success_rate=self.success_rate,
            last_attempt_correct=self.last_correct,
            last_attempt_timestamp=self.last_timestamp,
            streak=self.streak,
            category=classify_question(self.total, self.success_rate, self.streak),
        )


def build_performance_index(
    history: Iterable[ExamResult],
    questions: Sequence[Question],
) -> PerformanceIndex:
    """
    Replay attempt history into a performance index.

    Args:
        history: Attempts in any order (they are replayed oldest first)
        questions: Current question set; defines the index keys and order

    Returns:
        Mapping of question id to QuestionPerformance, in question order

    Example:
        >>> index = build_performance_index(history_store.list_attempts(name), exam.all_questions)
        >>> index[q.id].category
        <QuestionCategory.IMPROVING: 'IMPROVING'>
    """
    tallies: Dict[str, _Tally] = {q.id: _Tally(q.id, q.order) for q in questions}

    orphaned = 0
    for attempt in sorted(history, key=lambda r: r.timestamp):
        for result in attempt.question_results:
            tally = tallies.get(result.question_id)
            if tally is None:
                orphaned += 1
                continue
            tally.record(result, attempt.timestamp)

    if orphaned:
        logger.debug(f"Ignored {orphaned} results for questions no longer in the quiz")

    return {question_id: tally.freeze() for question_id, tally in tallies.items()}


def summarize_performance(index: PerformanceIndex) -> PerformanceSummary:
    """
    Count questions per mastery category.

    Example:
        >>> summarize_performance(index).mastery_percent
        40
    """
    counts = {category: 0 for category in QuestionCategory}
    for perf in index.values():
        counts[QuestionCategory(perf.category)] += 1

    return PerformanceSummary(
        mastered=counts[QuestionCategory.MASTERED],
        improving=counts[QuestionCategory.IMPROVING],
        struggling=counts[QuestionCategory.STRUGGLING],
        failed=counts[QuestionCategory.FAILED],
        unseen=counts[QuestionCategory.UNSEEN],
    )
