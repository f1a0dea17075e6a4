"""
Serialization Utilities

Compact codecs for the two record types stored inside history documents.

Attempt records (ResultCodec):
- Every scalar field gets a short key (``sessionId`` → ``id`` ...)
- ``pct`` and ``dur`` are rounded to one decimal place, ties away from zero
- Per-question answer sub-fields are written only when populated;
  absent fields are omitted, never stored as null/empty

Performance index:
- ``{version, updatedAt, questions: {<id>: {o,t,c,i,u,sr,lc,lt,st,cat}}}``

Round-trip law: ``decompress_result(compress_result(r))`` reproduces every
field compress touches, including the one-decimal rounding.
"""

from __future__ import annotations

import json
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from ..models.performance import PerformanceIndex, QuestionCategory, QuestionPerformance
from ..models.results import (
    AnswerStatus,
    ExamResult,
    MatchedPair,
    QuestionResult,
    UserAnswer,
)
from ..schemas.validator import (
    PERFORMANCE_SCHEMA_VERSION,
    validate_attempt,
    validate_performance,
)


# ─────────────────────────────────────────────────────────────────────────────
# Rounding
# ─────────────────────────────────────────────────────────────────────────────

_TENTH = Decimal("0.1")


def round_tenth(value: float) -> float:
    """
    Round to one decimal place with ties away from zero.

    Works on the shortest decimal form of ``value``, so ``12.25`` rounds
    to ``12.3`` (``round()`` would give ``12.2``).

    Example:
        >>> round_tenth(12.25)
        12.3
    """
    return float(Decimal(str(value)).quantize(_TENTH, rounding=ROUND_HALF_UP))


# ─────────────────────────────────────────────────────────────────────────────
# Attempt Records
# ─────────────────────────────────────────────────────────────────────────────

def compress_result(result: ExamResult) -> dict[str, Any]:
    """
    Convert an attempt to its compact, field-renamed form.

    Args:
        result: Attempt to compress

    Returns:
        Dictionary suitable for JSON serialization

    Example:
        >>> compress_result(result)["pct"]
        66.7
    """
    return {
        "id": result.session_id,
        "ts": result.timestamp,
        "sc": result.total_score,
        "mSc": result.max_score,
        "pct": round_tenth(result.percentage),
        "p": result.is_pass,
        "dur": round_tenth(result.duration_seconds),
        "res": [_compress_question_result(qr) for qr in result.question_results],
    }


def _compress_question_result(qr: QuestionResult) -> dict[str, Any]:
    answer = qr.user_answer
    entry: dict[str, Any] = {
        "q": qr.question_id,
        "ok": qr.is_correct,
        "s": qr.score,
        "st": AnswerStatus(answer.status).value,
    }
    if answer.selected_option_index is not None:
        entry["idx"] = answer.selected_option_index
    if answer.selected_option_indices is not None:
        entry["idxs"] = list(answer.selected_option_indices)
    if answer.boolean_selection is not None:
        entry["val"] = answer.boolean_selection
    if answer.text_inputs is not None:
        entry["txt"] = list(answer.text_inputs)
    if answer.matched_pairs is not None:
        entry["pts"] = [{"l": pair.left, "r": pair.right} for pair in answer.matched_pairs]
    if answer.is_marked:
        entry["m"] = True
    return entry


def decompress_result(data: Mapping[str, Any], *, validate: bool = True) -> ExamResult:
    """
    Rebuild an attempt from its compact form.

    Exact structural inverse of compress_result().

    Args:
        data: Compact record (decoded JSON)
        validate: Whether to validate against the attempt schema first

    Returns:
        ExamResult instance

    Raises:
        ValidationError: If validate=True and the record is malformed
    """
    if validate:
        validate_attempt(data)

    return ExamResult(
        session_id=data["id"],
        timestamp=int(data["ts"]),
        total_score=data["sc"],
        max_score=data["mSc"],
        percentage=data["pct"],
        is_pass=data["p"],
        duration_seconds=data["dur"],
        question_results=tuple(_decompress_question_result(r) for r in data["res"]),
    )


def _decompress_question_result(entry: Mapping[str, Any]) -> QuestionResult:
    pairs = entry.get("pts")
    indices = entry.get("idxs")
    texts = entry.get("txt")
    answer = UserAnswer(
        question_id=entry["q"],
        status=AnswerStatus(entry["st"]),
        selected_option_index=entry.get("idx"),
        selected_option_indices=tuple(indices) if indices is not None else None,
        boolean_selection=entry.get("val"),
        text_inputs=tuple(texts) if texts is not None else None,
        matched_pairs=(
            tuple(MatchedPair(p["l"], p["r"]) for p in pairs)
            if pairs is not None else None
        ),
        is_marked=bool(entry.get("m", False)),
    )
    return QuestionResult(
        question_id=entry["q"],
        is_correct=entry["ok"],
        score=entry["s"],
        user_answer=answer,
    )


def dumps_result(result: ExamResult) -> str:
    """Serialize an attempt to single-line compact JSON."""
    return json.dumps(compress_result(result), ensure_ascii=False, separators=(",", ":"))


# ─────────────────────────────────────────────────────────────────────────────
# Performance Index
# ─────────────────────────────────────────────────────────────────────────────

def compress_performance(
    index: PerformanceIndex,
    *,
    updated_at: int | None = None,
) -> dict[str, Any]:
    """
    Convert a performance index to its compact block payload.

    Args:
        index: Mapping of question id to QuestionPerformance
        updated_at: Write timestamp in ms (defaults to now)

    Returns:
        ``{"version", "updatedAt", "questions"}`` dictionary
    """
    if updated_at is None:
        updated_at = int(time.time() * 1000)

    questions = {}
    for question_id, perf in index.items():
        questions[question_id] = {
            "o": perf.question_order,
            "t": perf.total_attempts,
            "c": perf.correct_count,
            "i": perf.incorrect_count,
            "u": perf.unanswered_count,
            "sr": perf.success_rate,
            "lc": perf.last_attempt_correct,
            "lt": perf.last_attempt_timestamp,
            "st": perf.streak,
            "cat": QuestionCategory(perf.category).value,
        }
    return {
        "version": PERFORMANCE_SCHEMA_VERSION,
        "updatedAt": updated_at,
        "questions": questions,
    }


def decompress_performance(
    data: Mapping[str, Any],
    *,
    validate: bool = True,
) -> PerformanceIndex:
    """
    Rebuild a performance index from its compact block payload.

    Args:
        data: Decoded JSON payload
        validate: Whether to validate against the performance schema first

    Returns:
        Mapping of question id to QuestionPerformance, in stored order

    Raises:
        ValidationError: If validate=True and the payload is malformed
    """
    if validate:
        validate_performance(data)

    index: PerformanceIndex = {}
    for question_id, q in data["questions"].items():
        index[question_id] = QuestionPerformance(
            question_id=question_id,
            question_order=q["o"],
            total_attempts=q["t"],
            correct_count=q["c"],
            incorrect_count=q["i"],
            unanswered_count=q["u"],
            success_rate=float(q["sr"]),
            last_attempt_correct=q["lc"],
            last_attempt_timestamp=int(q["lt"]),
            streak=q["st"],
            category=QuestionCategory(q["cat"]),
        )
    return index
