"""
Module: parsing.parser

Purpose:
    Turn plain-text quiz markup into an ExamDefinition.

    The document is read line by line. Each classified line is folded into
    an immutable QuestionDraft accumulator; a header line (or end of input)
    hands the current draft to finalize_draft(), which emits a validated
    Question or nothing. Malformed input never aborts the parse: problems
    become advisory errors on the question, and unparseable questions are
    dropped.

Key Functions:
    - parse_quiz(): Markup text → ExamDefinition
    - start_draft(), apply_answer(), apply_content(), finalize_draft():
      The accumulator steps

Key Classes:
    - QuestionDraft: Partial question carried across lines

Dependencies:
    - parsing.grammar: Line classification
    - parsing.frontmatter: Quiz settings
    - parsing.ranges: exam-range filtering

Used By:
    - controller.StudyController.load_quiz
    - cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from cbt_toolkit.core.models import (
    DEFAULT_TITLE,
    NO_CORRECT_INDEX,
    ExamConfig,
    ExamDefinition,
    FillInBlankQuestion,
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    SelectAllQuestion,
    TextAnswerQuestion,
    TrueFalseQuestion,
    generate_question_id,
)
from cbt_toolkit.core.models.questions import MAX_OPTIONS

from .frontmatter import parse_frontmatter
from .grammar import (
    LineKind,
    MarkupLine,
    classify_line,
    is_valid_option_label,
    match_option,
    match_pair,
    split_blanks,
    strip_label_separator,
)
from .ranges import apply_exam_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionDraft:
    """
    Question under construction (immutable accumulator).

    Every step returns a new draft; nothing is mutated in place.

    Attributes:
        type: Variant from the header keyword
        id: Generated question id
        text: Question text accumulated so far
        options: Option texts (MC/SATA)
        labels: Raw option labels with separator (MC/SATA)
        answer_keys: Lowercased raw answer labels (MC/SATA)
        raw_pairs: ``(left, right)`` text pairs (MATCH)
        is_true: Answer (TF)
        correct_answers: Accepted answers (FIB)
        segments: Text around blanks, captured when the key is read (FIB)
        reference_answer: Reference text (SA/LA)
    """

    type: QuestionType
    id: str
    text: str
    options: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    answer_keys: tuple[str, ...] = ()
    raw_pairs: tuple[tuple[str, str], ...] = ()
    is_true: bool = False
    correct_answers: tuple[str, ...] = ()
    segments: Optional[tuple[str, ...]] = None
    reference_answer: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────

def parse_quiz(content: str, source_path: str = "") -> ExamDefinition:
    """
    Parse quiz markup into an ExamDefinition.

    Args:
        content: Full quiz document text
        source_path: Document name, recorded on the definition

    Returns:
        ExamDefinition. Never raises for malformed markup.

    Example:
        >>> exam = parse_quiz("@mc What is 2+2?\\na) 3\\nb) 4\\n=b")
        >>> exam.questions[0].correct_index
        1
    """
    content = content.removeprefix("\ufeff").replace("\r\n", "\n")
    frontmatter = parse_frontmatter(content)

    drafts = _collect_drafts(classify_line(raw, i) for i, raw in enumerate(content.split("\n")))

    questions: List[Question] = []
    for draft in drafts:
        question = finalize_draft(draft, order=len(questions) + 1)
        if question is None:
            logger.debug(f"Dropped unparseable {draft.type} question {draft.id!r}")
            continue
        questions.append(question)

    active: tuple[Question, ...] = tuple(questions)
    full: Optional[tuple[Question, ...]] = None
    range_errors: tuple[str, ...] = ()
    if frontmatter.exam_range:
        selected, range_errors = apply_exam_range(questions, frontmatter.exam_range)
        if range_errors:
            logger.info(f"Invalid exam-range {frontmatter.exam_range!r}: {list(range_errors)}")
        else:
            active, full = selected, tuple(questions)

    config = ExamConfig(
        time_limit_minutes=frontmatter.time_limit_minutes,
        pass_threshold=frontmatter.pass_threshold,
        shuffle_questions=frontmatter.shuffle,
        show_answer=frontmatter.show_answer,
        exam_range=frontmatter.exam_range,
        range_errors=range_errors,
    )

    logger.debug(f"Parsed {len(questions)} questions from {source_path or '<text>'}")
    return ExamDefinition(
        title=frontmatter.title or DEFAULT_TITLE,
        source_path=source_path,
        questions=active,
        config=config,
        full_questions=full,
    )


def _collect_drafts(lines: Iterable[MarkupLine]) -> List[QuestionDraft]:
    """Fold classified lines into one draft per recognized header."""
    drafts: List[QuestionDraft] = []
    draft: Optional[QuestionDraft] = None

    for line in lines:
        if line.kind is LineKind.SKIP:
            continue

        if line.kind is LineKind.HEADER:
            if draft is not None:
                drafts.append(draft)
            draft = start_draft(line)
            if draft is None:
                logger.debug(f"Line {line.index + 1}: unknown question type '@{line.keyword}'")
            continue

        if draft is None:
            continue
        if line.kind is LineKind.ANSWER:
            draft = apply_answer(draft, line.text)
        else:
            draft = apply_content(draft, line.text)

    if draft is not None:
        drafts.append(draft)
    return drafts


# ─────────────────────────────────────────────────────────────────────────────
# Accumulator Steps
# ─────────────────────────────────────────────────────────────────────────────

def start_draft(line: MarkupLine) -> Optional[QuestionDraft]:
    """
    Start a draft from a header line.

    Args:
        line: HEADER line

    Returns:
        New draft, or None when the keyword is not a known question type
    """
    question_type = QuestionType.from_keyword(line.keyword or "")
    if question_type is None:
        return None
    return QuestionDraft(
        type=question_type,
        id=generate_question_id(f"{line.text}{line.index}"),
        text=line.text,
    )


def apply_answer(draft: QuestionDraft, answer: str) -> QuestionDraft:
    """
    Fold an answer-key line (``=`` already removed) into the draft.

    MC keeps raw labels for resolution at finalize; SATA splits on commas;
    TF compares against "true"; FIB splits accepted answers on commas and
    captures the text segments around each blank; MATCH ignores the key;
    SA/LA store it verbatim.
    """
    qtype = draft.type
    if qtype is QuestionType.MULTIPLE_CHOICE:
        return replace(draft, answer_keys=draft.answer_keys + (answer.strip().lower(),))
    if qtype is QuestionType.SELECT_ALL:
        keys = tuple(key.strip().lower() for key in answer.split(","))
        return replace(draft, answer_keys=draft.answer_keys + keys)
    if qtype is QuestionType.TRUE_FALSE:
        return replace(draft, is_true=answer.lower() == "true")
    if qtype is QuestionType.FILL_IN_BLANK:
        return replace(
            draft,
            correct_answers=tuple(part.strip() for part in answer.split(",")),
            segments=split_blanks(draft.text),
        )
    if qtype is QuestionType.MATCHING:
        # Correctness is positional; see MatchingQuestion.aligned
        return draft
    return replace(draft, reference_answer=answer)


def apply_content(draft: QuestionDraft, line: str) -> QuestionDraft:
    """Fold a content line into the draft according to its variant."""
    if draft.type.has_options:
        option = match_option(line)
        if option:
            label, text = option
            return replace(draft, options=draft.options + (text,), labels=draft.labels + (label,))
        if not draft.options:
            return _append_text(draft, line)
        return draft

    if draft.type is QuestionType.MATCHING:
        pair = match_pair(line)
        if pair:
            return replace(draft, raw_pairs=draft.raw_pairs + (pair,))
        return _append_text(draft, line)

    return _append_text(draft, line)


def _append_text(draft: QuestionDraft, line: str) -> QuestionDraft:
    return replace(draft, text=f"{draft.text}\n{line}")


# ─────────────────────────────────────────────────────────────────────────────
# Finalization
# ─────────────────────────────────────────────────────────────────────────────

def finalize_draft(draft: QuestionDraft, order: int) -> Optional[Question]:
    """
    Validate a draft and emit its Question.

    Args:
        draft: Completed draft
        order: Display order to assign if the question is kept

    Returns:
        Question, or None when the draft is unparseable (no id, no text,
        or a matching question without pairs)
    """
    if not draft.id or not draft.text:
        return None

    qtype = draft.type
    if qtype is QuestionType.MATCHING:
        if not draft.raw_pairs:
            return None
        return MatchingQuestion.aligned(draft.id, order, draft.text, draft.raw_pairs)

    if qtype.has_options:
        return _finalize_options(draft, order)

    if qtype is QuestionType.TRUE_FALSE:
        return TrueFalseQuestion(
            id=draft.id, order=order, question_text=draft.text, is_true=draft.is_true
        )

    if qtype is QuestionType.FILL_IN_BLANK:
        segments = draft.segments if draft.segments is not None else split_blanks(draft.text)
        return FillInBlankQuestion(
            id=draft.id,
            order=order,
            question_text=draft.text,
            segments=segments,
            correct_answers=draft.correct_answers,
        )

    return TextAnswerQuestion(
        id=draft.id,
        order=order,
        question_text=draft.text,
        correct_answer_text=draft.reference_answer,
        long_form=qtype is QuestionType.LONG_ANSWER,
    )


def _finalize_options(draft: QuestionDraft, order: int) -> Question:
    errors: List[str] = []
    _check_labels(draft.labels, errors)

    label_to_index = {
        strip_label_separator(label).lower(): idx for idx, label in enumerate(draft.labels)
    }

    if draft.type is QuestionType.MULTIPLE_CHOICE:
        correct_index = NO_CORRECT_INDEX
        if draft.answer_keys:
            key = draft.answer_keys[0]
            resolved = label_to_index.get(key)
            if resolved is None:
                errors.append(f"Correct answer label '{key}' does not match any existing options.")
            else:
                correct_index = resolved
        return MultipleChoiceQuestion(
            id=draft.id,
            order=order,
            question_text=draft.text,
            errors=tuple(errors[:1]),
            options=draft.options,
            option_labels=draft.labels,
            correct_index=correct_index,
        )

    indices: List[int] = []
    for key in draft.answer_keys:
        resolved = label_to_index.get(key)
        if resolved is None:
            errors.append(f"Correct answer label '{key}' does not match any existing options.")
        else:
            indices.append(resolved)
    return SelectAllQuestion(
        id=draft.id,
        order=order,
        question_text=draft.text,
        errors=tuple(errors[:1]),
        options=draft.options,
        option_labels=draft.labels,
        correct_indices=tuple(indices),
    )


def _check_labels(labels: tuple[str, ...], errors: List[str]) -> None:
    """Append label problems to errors (only the first one is kept)."""
    if len(labels) > MAX_OPTIONS:
        errors.append(
            f"Question has more than {MAX_OPTIONS} options. Maximum allowed is {MAX_OPTIONS} (a-z)."
        )

    seen: set[str] = set()
    for label_with_sep in labels:
        raw = strip_label_separator(label_with_sep)
        if not is_valid_option_label(raw):
            errors.append(
                f"Invalid option label '{raw}'. Labels must be lowercase 'a' through 'z'."
            )
        label = raw.lower()
        if label in seen:
            errors.append(
                f"Duplicate option label '{label}' found. Each option must have a unique label."
            )
        seen.add(label)
