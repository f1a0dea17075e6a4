"""
Module: controller

Purpose:
    Orchestrate the study workflow for one quiz.
    Parse → Record attempts → Rebuild performance → Cache → Adaptive re-study

Key Classes:
    - StudyController: Workflow entry point
    - AdaptiveExam: Adaptive selection plus the derived exam definition

Dependencies:
    - parsing: Quiz markup
    - ledger: History and performance documents
    - analysis: Performance index and adaptive selection
    - config: StudySettings

Used By:
    - cli
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, List, Optional

from cbt_toolkit.analysis import build_performance_index, select_adaptive_questions
from cbt_toolkit.config import StudySettings
from cbt_toolkit.core.models import (
    AdaptiveSelection,
    ExamDefinition,
    ExamResult,
    PerformanceIndex,
)
from cbt_toolkit.ledger import DocumentStore, HistoryStore, PerformanceStore
from cbt_toolkit.parsing import parse_quiz

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdaptiveExam:
    """
    Outcome of an adaptive re-study request.

    Attributes:
        selection: Selection result with outcome flags
        definition: Exam restricted to the selected questions (complete set
            kept in full_questions), or None when nothing was selected
    """

    selection: AdaptiveSelection
    definition: Optional[ExamDefinition] = None


class StudyController:
    """
    Study workflow over one document store.

    The performance index is always built against the complete question
    set of a definition, so range-restricted and adaptive sessions update
    the same index as full sessions.

    Example:
        >>> controller = StudyController(FileDocumentStore("~/notes"))
        >>> exam = controller.load_quiz("biology/cells.md")
        >>> controller.record_attempt(exam, result)
        >>> controller.build_adaptive_exam(exam).selection.improvable_count
        4
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: Optional[StudySettings] = None,
        *,
        today: Optional[Callable[[], date]] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.store = store
        self.settings = settings or StudySettings()
        self.history = HistoryStore(store, today=today)
        self.performance = PerformanceStore(store, clock=clock)

    def load_quiz(self, name: str) -> ExamDefinition:
        """
        Read and parse a quiz, filling unset config from settings.

        Raises:
            DocumentNotFoundError: If the quiz document does not exist
        """
        definition = parse_quiz(self.store.read(name), source_path=name)
        config = self.settings.apply_defaults(definition.config)
        logger.info(f"Loaded {name}: {len(definition.questions)} questions")
        return replace(definition, config=config)

    def attempts(self, definition: ExamDefinition) -> List[ExamResult]:
        """Recorded attempts, newest first."""
        return self.history.list_attempts(definition.source_path)

    def record_attempt(
        self,
        definition: ExamDefinition,
        result: ExamResult,
    ) -> Optional[PerformanceIndex]:
        """
        Append an attempt and refresh the cached performance index.

        Returns:
            The rebuilt index, or None when history saving is disabled
        """
        if not self.settings.save_history:
            logger.debug(f"History disabled; attempt {result.short_id} not recorded")
            return None

        self.history.append(definition.source_path, result)
        return self.refresh_performance(definition)

    def refresh_performance(self, definition: ExamDefinition) -> Optional[PerformanceIndex]:
        """
        Rebuild the index from the full history and cache it.

        Returns:
            The index, or None when there is no recorded history
        """
        history = self.attempts(definition)
        index = build_performance_index(history, definition.all_questions)
        # An empty history still overwrites the cached block
        self.performance.write(definition.source_path, index)
        return index if history else None

    def load_performance(self, definition: ExamDefinition) -> Optional[PerformanceIndex]:
        """
        Cached index, rebuilt from history when missing, unreadable or
        keyed to a different question set.
        """
        cached = self.performance.read(definition.source_path)
        if cached is not None and set(cached) == {q.id for q in definition.all_questions}:
            return cached

        if cached is not None:
            logger.info(f"Performance cache for {definition.source_path} is stale; rebuilding")
        return self.refresh_performance(definition)

    def delete_attempt(self, definition: ExamDefinition, session_id: str) -> bool:
        """
        Remove an attempt and refresh the cached index.

        Returns:
            True if the attempt existed
        """
        removed = self.history.remove(definition.source_path, session_id)
        if removed:
            self.refresh_performance(definition)
        return removed

    def build_adaptive_exam(
        self,
        definition: ExamDefinition,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> AdaptiveExam:
        """
        Select an adaptive re-study session for a quiz.

        Args:
            definition: Parsed quiz
            seed: Seed for reproducible selection (ignored when rng is given)
            rng: Random source

        Returns:
            AdaptiveExam; its definition is None when the selection is empty
        """
        index = self.load_performance(definition) or {}
        selection = select_adaptive_questions(
            definition.all_questions,
            index,
            self.settings.adaptive_config(seed),
            rng=rng,
        )

        if selection.is_empty:
            logger.info(
                f"No adaptive session for {definition.source_path} "
                f"(no_history={selection.no_history}, all_mastered={selection.all_mastered})"
            )
            return AdaptiveExam(selection)

        return AdaptiveExam(selection, definition.with_questions(selection.questions))
