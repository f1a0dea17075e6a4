"""
Module: parsing

Purpose:
    Quiz markup parsing. Recognizes a small fixed line grammar
    (``@type`` headers, lettered options, ``=`` answer keys, ``left | right``
    pairs, backtick-underscore blanks) plus a leading frontmatter block.
    Anything else is prose continuation of the current question.

Key Functions:
    - parse_quiz(): Markup text → ExamDefinition
    - parse_frontmatter(): Leading ``---`` block → Frontmatter
    - parse_exam_range(): ``exam-range`` expression → RangeSelection

Used By:
    - controller.StudyController
    - cli
"""

from .frontmatter import Frontmatter, parse_frontmatter
from .parser import QuestionDraft, finalize_draft, parse_quiz
from .ranges import RangeSelection, apply_exam_range, parse_exam_range

__all__ = [
    "parse_quiz",
    "QuestionDraft",
    "finalize_draft",
    "Frontmatter",
    "parse_frontmatter",
    "RangeSelection",
    "parse_exam_range",
    "apply_exam_range",
]
