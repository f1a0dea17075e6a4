import pytest
import sys
from datetime import date
from pathlib import Path

# Add src to sys.path so we can import cbt_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from cbt_toolkit.core.models import (  # noqa: E402
    AnswerStatus,
    ExamResult,
    QuestionResult,
    UserAnswer,
)
from cbt_toolkit.ledger import MemoryDocumentStore  # noqa: E402


def make_result(
    session_id: str = "3f2a9c1e-0000-4000-8000-000000000001",
    timestamp: int = 1714572180000,
    outcomes: dict | None = None,
    duration_seconds: float = 303.4,
) -> ExamResult:
    """
    Build an attempt from ``{question_id: True / False / None}``.

    None records the question as unanswered.
    """
    outcomes = outcomes if outcomes is not None else {"q1": True, "q2": False}
    results = []
    for question_id, outcome in outcomes.items():
        status = AnswerStatus.UNANSWERED if outcome is None else AnswerStatus.ANSWERED
        results.append(
            QuestionResult(
                question_id=question_id,
                is_correct=bool(outcome),
                score=1 if outcome else 0,
                user_answer=UserAnswer(question_id=question_id, status=status),
            )
        )

    correct = sum(1 for r in results if r.is_correct)
    total = len(results)
    percentage = correct / total * 100 if total else 0.0
    return ExamResult(
        session_id=session_id,
        timestamp=timestamp,
        total_score=correct,
        max_score=total,
        percentage=percentage,
        is_pass=percentage >= 70,
        duration_seconds=duration_seconds,
        question_results=tuple(results),
    )


# Common test fixtures
@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    """Empty in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def fixed_today():
    """Date source pinned to 2024-05-01."""
    return lambda: date(2024, 5, 1)


@pytest.fixture
def result_factory():
    """Factory for attempts; see make_result()."""
    return make_result
