"""
Module: parsing.grammar

Purpose:
    Line-level grammar of the quiz markup. Classifies each raw line as a
    question header, an answer key, variant content, or structural noise,
    and exposes the sub-patterns (option, matching pair, blank marker)
    used while accumulating a question.

Key Functions:
    - classify_line(): Raw line → MarkupLine
    - match_option(): ``a) text`` option lines
    - match_pair(): ``left | right`` matching lines
    - split_blanks(): Split text around backtick-underscore blank markers
    - strip_label_separator(): ``"a)"`` → ``"a"``

Dependencies:
    - re (std)

Used By:
    - parsing.parser
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


HEADER_RE = re.compile(r"^@(\w+)\s+(?:\d+[).]\s*)?(.*)", re.ASCII)
OPTION_RE = re.compile(r"^(\S+)([).])\s+(.*)")
MATCH_PAIR_RE = re.compile(r"^(.+?)\s*\|\s*(.+)$")
BLANK_RE = re.compile(r"`_+`")
LABEL_SEPARATOR_RE = re.compile(r"[).]$")
OPTION_LABEL_RE = re.compile(r"^[a-z]$")


class LineKind(Enum):
    SKIP = "skip"          # blank, `#` heading, `---` separator
    HEADER = "header"      # @<type> <text>
    ANSWER = "answer"      # =<text>
    CONTENT = "content"    # anything else


@dataclass(frozen=True)
class MarkupLine:
    """
    One classified markup line.

    Attributes:
        index: Zero-based line index in the source document
        kind: Line classification
        text: For HEADER the question text; for ANSWER the key text
            (``=`` removed, trimmed); otherwise the trimmed line
        keyword: Header type keyword, lowercased (HEADER only)
    """

    index: int
    kind: LineKind
    text: str = ""
    keyword: Optional[str] = None


def classify_line(raw: str, index: int) -> MarkupLine:
    """
    Classify one raw line of quiz markup.

    Args:
        raw: Line without its newline
        index: Zero-based line index

    Returns:
        MarkupLine describing the line
    """
    line = raw.strip()
    if not line or line.startswith("---") or line.startswith("#"):
        return MarkupLine(index, LineKind.SKIP)

    header = HEADER_RE.match(line)
    if header:
        return MarkupLine(index, LineKind.HEADER, header.group(2), header.group(1).lower())

    if line.startswith("="):
        return MarkupLine(index, LineKind.ANSWER, line[1:].strip())

    return MarkupLine(index, LineKind.CONTENT, line)


def match_option(line: str) -> Optional[tuple[str, str]]:
    """
    Match an option line.

    Returns:
        ``(raw_label, content)`` with the separator kept on the label
        (``("a)", "Paris")``), or None
    """
    match = OPTION_RE.match(line)
    if not match:
        return None
    return match.group(1) + match.group(2), match.group(3)


def match_pair(line: str) -> Optional[tuple[str, str]]:
    """Match a ``left | right`` line; both sides trimmed."""
    match = MATCH_PAIR_RE.match(line)
    if not match:
        return None
    return match.group(1).strip(), match.group(2).strip()


def split_blanks(text: str) -> tuple[str, ...]:
    """
    Split question text around blank markers.

    Example:
        >>> split_blanks("The `____` barks.")
        ('The ', ' barks.')
    """
    return tuple(BLANK_RE.split(text))


def strip_label_separator(label: str) -> str:
    return LABEL_SEPARATOR_RE.sub("", label)


def is_valid_option_label(label: str) -> bool:
    """True for a single lowercase letter ``a``-``z``."""
    return bool(OPTION_LABEL_RE.match(label))
