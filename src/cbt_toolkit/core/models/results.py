"""
Module: results

Purpose:
    Provides the attempt record types. An ExamResult is the opaque output of
    the external scoring step: one completed session with per-question
    correctness and the user's answer state. Recorded attempts are never
    edited; the only mutation the ledger supports is deleting a whole attempt.

Key Classes:
    - AnswerStatus: UNANSWERED / ANSWERED / FLAGGED
    - MatchedPair: One user pairing in a matching answer
    - UserAnswer: Answer state for one question
    - QuestionResult: Correctness and score for one question
    - ExamResult: Complete attempt

Dependencies:
    - dataclasses (std)
    - datetime (std)

Used By:
    - core.utils.serialization (compact codec)
    - ledger.history
    - analysis.index
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

Number = Union[int, float]


class AnswerStatus(str, Enum):
    """Answer status as recorded by the exam session."""
    UNANSWERED = "UNANSWERED"
    ANSWERED = "ANSWERED"
    FLAGGED = "FLAGGED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class MatchedPair:
    """User pairing of left item ``left`` with right item ``right``."""

    left: int
    right: int


@dataclass(frozen=True)
class UserAnswer:
    """
    Answer state for one question.

    Only the sub-fields relevant to the question's variant are populated;
    the others stay None.

    Attributes:
        question_id: Question this answer belongs to
        status: Session status of the answer
        selected_option_index: Chosen option (multiple choice)
        selected_option_indices: Chosen options (select all)
        boolean_selection: Chosen value (true/false)
        text_inputs: Typed answers (fill-in-blank, short/long answer)
        matched_pairs: User pairings (matching)
        is_marked: Question was flagged for review
    """

    question_id: str
    status: AnswerStatus = AnswerStatus.UNANSWERED
    selected_option_index: Optional[int] = None
    selected_option_indices: Optional[tuple[int, ...]] = None
    boolean_selection: Optional[bool] = None
    text_inputs: Optional[tuple[str, ...]] = None
    matched_pairs: Optional[tuple[MatchedPair, ...]] = None
    is_marked: bool = False


@dataclass(frozen=True)
class QuestionResult:
    question_id: str
    is_correct: bool
    score: Number
    user_answer: UserAnswer

    @property
    def is_unanswered(self) -> bool:
        return self.user_answer.status == AnswerStatus.UNANSWERED


@dataclass(frozen=True)
class ExamResult:
    """
    One recorded attempt (immutable).

    Attributes:
        session_id: Unique session identifier (UUID string)
        timestamp: Submission time in milliseconds since the Unix epoch
        total_score: Points awarded
        max_score: Points available
        percentage: total_score / max_score * 100
        is_pass: Whether the attempt met the pass threshold
        duration_seconds: Time spent on the attempt
        question_results: Per-question results, in session order
    """

    session_id: str
    timestamp: int
    total_score: Number
    max_score: Number
    percentage: float
    is_pass: bool
    duration_seconds: float
    question_results: tuple[QuestionResult, ...] = ()

    def __post_init__(self) -> None:
        """Validate result on construction."""
        if not self.session_id:
            raise ValueError("session_id must not be empty")
        if self.max_score < 0:
            raise ValueError(f"max_score cannot be negative: {self.max_score}")

    @property
    def short_id(self) -> str:
        """First 8 characters of session_id, as shown in the history table."""
        return self.session_id[:8]

    @property
    def recorded_at(self) -> datetime:
        """Submission time as a local datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000)

    @property
    def correct_count(self) -> int:
        return sum(1 for qr in self.question_results if qr.is_correct)
