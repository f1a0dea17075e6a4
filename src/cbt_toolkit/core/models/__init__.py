"""
Core Models Package

Immutable data models shared by the parser, the ledger stores and the
analysis functions. All models are frozen dataclasses: parsing creates
questions once, attempts are append-only, and performance records are
rebuilt rather than edited.
"""

from .questions import (
    NO_CORRECT_INDEX,
    FillInBlankQuestion,
    MatchingQuestion,
    MatchPair,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    SelectAllQuestion,
    TextAnswerQuestion,
    TrueFalseQuestion,
    generate_question_id,
    question_type_of,
)
from .exam import DEFAULT_TITLE, ExamConfig, ExamDefinition
from .results import AnswerStatus, ExamResult, MatchedPair, QuestionResult, UserAnswer
from .performance import (
    NEVER_ATTEMPTED,
    AdaptiveSelection,
    PerformanceIndex,
    PerformanceSummary,
    QuestionCategory,
    QuestionPerformance,
)

__all__ = [
    # Questions
    "NO_CORRECT_INDEX",
    "Question",
    "QuestionType",
    "MultipleChoiceQuestion",
    "SelectAllQuestion",
    "TrueFalseQuestion",
    "MatchingQuestion",
    "MatchPair",
    "FillInBlankQuestion",
    "TextAnswerQuestion",
    "generate_question_id",
    "question_type_of",
    # Exam
    "DEFAULT_TITLE",
    "ExamConfig",
    "ExamDefinition",
    # Results
    "AnswerStatus",
    "ExamResult",
    "MatchedPair",
    "QuestionResult",
    "UserAnswer",
    # Performance
    "NEVER_ATTEMPTED",
    "AdaptiveSelection",
    "PerformanceIndex",
    "PerformanceSummary",
    "QuestionCategory",
    "QuestionPerformance",
]
