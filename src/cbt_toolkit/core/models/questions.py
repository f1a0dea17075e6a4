"""
Module: questions

Purpose:
    Provides the Question dataclasses - the typed records produced by the
    markup parser. One frozen dataclass per question variant, all sharing
    the id / order / text / advisory-error fields of the Question base.

Key Classes:
    - QuestionType: Variant keyword enum (MC, SATA, TF, FIB, MATCH, SA, LA)
    - Question: Common base (id, order, question_text, errors)
    - MultipleChoiceQuestion, SelectAllQuestion, TrueFalseQuestion,
      MatchingQuestion, FillInBlankQuestion, TextAnswerQuestion
    - MatchPair: One (left, right) index pairing for matching questions

Key Functions:
    - generate_question_id(text): Deterministic base-36 rolling hash id

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - parsing.parser
    - core.models.exam
    - analysis.index, analysis.selector
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


NO_CORRECT_INDEX = -1
"""Sentinel correct_index for a multiple-choice key that matched no option."""

MAX_OPTIONS = 26

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class QuestionType(str, Enum):
    """Question variant, keyed by the markup header keyword."""
    MULTIPLE_CHOICE = "MC"
    SELECT_ALL = "SATA"
    TRUE_FALSE = "TF"
    FILL_IN_BLANK = "FIB"
    MATCHING = "MATCH"
    SHORT_ANSWER = "SA"
    LONG_ANSWER = "LA"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional[QuestionType]:
        """
        Map a header keyword (``mc``, ``sata`` ...) to its variant.

        Args:
            keyword: Keyword following the ``@`` sigil, any case

        Returns:
            Matching QuestionType, or None for an unrecognized keyword
        """
        return _KEYWORDS.get(keyword.lower())

    @property
    def has_options(self) -> bool:
        """True for the lettered-option variants (MC and SATA)."""
        return self in (QuestionType.MULTIPLE_CHOICE, QuestionType.SELECT_ALL)


_KEYWORDS = {
    "mc": QuestionType.MULTIPLE_CHOICE,
    "sata": QuestionType.SELECT_ALL,
    "tf": QuestionType.TRUE_FALSE,
    "fib": QuestionType.FILL_IN_BLANK,
    "match": QuestionType.MATCHING,
    "sa": QuestionType.SHORT_ANSWER,
    "la": QuestionType.LONG_ANSWER,
}


def generate_question_id(text: str) -> str:
    """
    Hash text into a short, deterministic question id.

    Rolling 32-bit signed hash (``h = h * 31 + unit``) over the UTF-16 code
    units of ``text``, absolute value, base-36 encoded. Ids stored in
    existing history ledgers depend on this exact scheme.

    Args:
        text: Question text concatenated with its header line index

    Returns:
        Lowercase base-36 id string

    Example:
        >>> generate_question_id("a")
        '2p'
    """
    value = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


# ─────────────────────────────────────────────────────────────────────────────
# Question Variants
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Question:
    """
    Common fields for every question variant (immutable).

    Attributes:
        id: Stable id from generate_question_id()
        order: 1-based display position within the source document
        question_text: Prompt text; continuation lines are newline-joined
        errors: Advisory validation messages. The question is still usable;
            the parser records the first failure only.

    Invariants:
        - id is unique within one ExamDefinition (collisions accepted as a
          known limitation of the hash)
    """

    type: ClassVar[QuestionType]

    id: str
    order: int
    question_text: str
    errors: tuple[str, ...] = ()

    @property
    def error(self) -> Optional[str]:
        """First advisory error, or None when the question parsed cleanly."""
        return self.errors[0] if self.errors else None

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class MultipleChoiceQuestion(Question):
    """
    Single-answer lettered-option question.

    Attributes:
        options: Option texts in document order
        option_labels: Raw labels as written, separator included (``"a)"``)
        correct_index: Zero-based index of the correct option, or
            NO_CORRECT_INDEX when the answer key could not be resolved
    """

    type: ClassVar[QuestionType] = QuestionType.MULTIPLE_CHOICE

    options: tuple[str, ...] = ()
    option_labels: tuple[str, ...] = ()
    correct_index: int = NO_CORRECT_INDEX

    @property
    def has_correct_option(self) -> bool:
        return 0 <= self.correct_index < len(self.options)


@dataclass(frozen=True)
class SelectAllQuestion(Question):
    """Multi-answer lettered-option question ("select all that apply")."""

    type: ClassVar[QuestionType] = QuestionType.SELECT_ALL

    options: tuple[str, ...] = ()
    option_labels: tuple[str, ...] = ()
    correct_indices: tuple[int, ...] = ()


@dataclass(frozen=True)
class TrueFalseQuestion(Question):
    type: ClassVar[QuestionType] = QuestionType.TRUE_FALSE

    is_true: bool = False


@dataclass(frozen=True)
class MatchPair:
    """Index pairing between a matching question's left and right items."""

    left: int
    right: int


@dataclass(frozen=True)
class MatchingQuestion(Question):
    """
    Left/right matching question.

    The correct pairing is always positional: left item ``i`` matches right
    item ``i``. Authors pre-align the pairs in the markup.

    Invariants:
        - len(left_items) == len(right_items)
        - every pair references valid indices into both lists
    """

    type: ClassVar[QuestionType] = QuestionType.MATCHING

    left_items: tuple[str, ...] = ()
    right_items: tuple[str, ...] = ()
    pairs: tuple[MatchPair, ...] = ()

    def __post_init__(self) -> None:
        """Validate item lists and pair indices on construction."""
        if len(self.left_items) != len(self.right_items):
            raise ValueError(
                f"Matching question {self.id!r} has {len(self.left_items)} left items "
                f"but {len(self.right_items)} right items"
            )
        size = len(self.left_items)
        for pair in self.pairs:
            if not (0 <= pair.left < size and 0 <= pair.right < size):
                raise ValueError(
                    f"Matching question {self.id!r} pair {pair} is out of range (size {size})"
                )

    @classmethod
    def aligned(
        cls,
        id: str,
        order: int,
        question_text: str,
        raw_pairs: tuple[tuple[str, str], ...],
        errors: tuple[str, ...] = (),
    ) -> MatchingQuestion:
        """
        Build a matching question whose correct pairing is the identity.

        Args:
            id: Question id
            order: Display order
            question_text: Prompt text
            raw_pairs: ``(left, right)`` text pairs in arrival order
            errors: Advisory errors to carry over

        Returns:
            MatchingQuestion with pairs ``(0, 0), (1, 1), ...``
        """
        return cls(
            id=id,
            order=order,
            question_text=question_text,
            errors=errors,
            left_items=tuple(left for left, _ in raw_pairs),
            right_items=tuple(right for _, right in raw_pairs),
            pairs=tuple(MatchPair(i, i) for i in range(len(raw_pairs))),
        )


@dataclass(frozen=True)
class FillInBlankQuestion(Question):
    """
    Cloze question.

    Attributes:
        segments: Text pieces surrounding each blank marker; a question with
            N blanks has N + 1 segments
        correct_answers: Accepted literal answers from the answer key
    """

    type: ClassVar[QuestionType] = QuestionType.FILL_IN_BLANK

    segments: tuple[str, ...] = ()
    correct_answers: tuple[str, ...] = ()

    @property
    def blank_count(self) -> int:
        return max(len(self.segments) - 1, 0)


@dataclass(frozen=True)
class TextAnswerQuestion(Question):
    """Free-text question; ``long_form`` distinguishes LA from SA."""

    type: ClassVar[QuestionType] = QuestionType.SHORT_ANSWER

    correct_answer_text: str = ""
    long_form: bool = False

    @property
    def question_type(self) -> QuestionType:
        return QuestionType.LONG_ANSWER if self.long_form else QuestionType.SHORT_ANSWER


def question_type_of(question: Question) -> QuestionType:
    """Return the variant of a question, resolving SA vs LA."""
    if isinstance(question, TextAnswerQuestion):
        return question.question_type
    return question.type
