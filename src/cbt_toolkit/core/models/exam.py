"""
Module: exam

Purpose:
    Provides the ExamDefinition dataclass - the parsed, gradeable form of a
    quiz document - and its ExamConfig settings block.

Key Classes:
    - ExamConfig: Frontmatter-derived settings (unset fields stay None)
    - ExamDefinition: Title, source, active questions, optional full set

Dependencies:
    - dataclasses (std)
    - .questions.Question

Used By:
    - parsing.parser
    - controller.StudyController
    - config.StudySettings.apply_defaults
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from .questions import Question


DEFAULT_TITLE = "Untitled Exam"


@dataclass(frozen=True)
class ExamConfig:
    """
    Exam settings read from the quiz frontmatter (immutable).

    Every field is optional; absence means "not specified by the author" and
    the caller applies its own default (see StudySettings.apply_defaults).

    Attributes:
        time_limit_minutes: Time limit in whole minutes
        pass_threshold: Pass mark as a 0-1 fraction (``pass-score: 75`` → 0.75)
        shuffle_questions: Whether to shuffle question order
        show_answer: Whether answers may be revealed during the exam
        exam_range: Raw ``exam-range`` expression, e.g. ``"1-10, 15"``
        range_errors: Problems found in exam_range; empty when valid or unset
    """

    time_limit_minutes: Optional[int] = None
    pass_threshold: Optional[float] = None
    shuffle_questions: Optional[bool] = None
    show_answer: Optional[bool] = None
    exam_range: Optional[str] = None
    range_errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.time_limit_minutes is not None and self.time_limit_minutes < 0:
            raise ValueError(f"time_limit_minutes must be non-negative: {self.time_limit_minutes}")
        if self.pass_threshold is not None and not (0.0 <= self.pass_threshold <= 1.0):
            raise ValueError(f"pass_threshold must be within 0-1: {self.pass_threshold}")

    @property
    def has_range_errors(self) -> bool:
        return bool(self.range_errors)


@dataclass(frozen=True)
class ExamDefinition:
    """
    Parsed quiz (immutable).

    Attributes:
        title: Quiz title (DEFAULT_TITLE when the frontmatter has none)
        source_path: Name of the document the quiz was parsed from
        questions: Active question list, in order
        config: Frontmatter settings
        full_questions: Complete question set when ``questions`` is a filtered
            or adaptive subset; None when ``questions`` is already complete

    Example:
        >>> definition.all_questions  # full set, whatever the active subset
    """

    title: str
    source_path: str
    questions: tuple[Question, ...]
    config: ExamConfig = field(default_factory=ExamConfig)
    full_questions: Optional[tuple[Question, ...]] = None

    @property
    def all_questions(self) -> tuple[Question, ...]:
        """Complete question set (full_questions if present, else questions)."""
        return self.full_questions if self.full_questions is not None else self.questions

    @property
    def is_subset(self) -> bool:
        return self.full_questions is not None

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Find a question in the complete set by id.

        Args:
            question_id: Question id

        Returns:
            Matching Question or None
        """
        for question in self.all_questions:
            if question.id == question_id:
                return question
        return None

    def with_questions(self, questions: Sequence[Question]) -> ExamDefinition:
        """
        Derive a definition that runs a subset of this quiz.

        The complete set is carried along in ``full_questions`` so history
        and performance stay keyed to every question.

        Args:
            questions: Questions to make active

        Returns:
            New ExamDefinition
        """
        return replace(self, questions=tuple(questions), full_questions=self.all_questions)

    def as_full_exam(self) -> ExamDefinition:
        """Return a definition whose active list is the complete set."""
        return replace(self, questions=self.all_questions, full_questions=None)
