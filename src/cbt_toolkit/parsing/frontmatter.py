"""
Module: parsing.frontmatter

Purpose:
    Read the small set of quiz settings from a leading ``---`` block.
    This is not a YAML parser: each key is matched independently and
    anything unrecognized is ignored.

Recognized keys:
    quiz-title     text, surrounding quotes removed
    time-limit     integer minutes
    pass-score     integer percentage, stored as a 0-1 fraction
    shuffle        true / false
    show-answer    true / false
    exam-range     question range expression (see parsing.ranges)

Used By:
    - parsing.parser
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


FRONTMATTER_RE = re.compile(r"^---\n([\s\S]*?)\n---")

_TITLE_RE = re.compile(r"quiz-title:[ \t]*(.*)")
_TIME_LIMIT_RE = re.compile(r"time-limit:[ \t]*(\d+)")
_PASS_SCORE_RE = re.compile(r"pass-score:[ \t]*(\d+)")
_SHUFFLE_RE = re.compile(r"shuffle:[ \t]*(true|false)")
_SHOW_ANSWER_RE = re.compile(r"show-answer:[ \t]*(true|false)")
_EXAM_RANGE_RE = re.compile(r"exam-range:[ \t]*(.*)")


@dataclass(frozen=True)
class Frontmatter:
    """Settings found in the frontmatter; None when a key is absent."""

    title: Optional[str] = None
    time_limit_minutes: Optional[int] = None
    pass_threshold: Optional[float] = None
    shuffle: Optional[bool] = None
    show_answer: Optional[bool] = None
    exam_range: Optional[str] = None


def parse_frontmatter(content: str) -> Frontmatter:
    """
    Extract quiz settings from the leading frontmatter block.

    Args:
        content: Full quiz document (``\\n`` line endings)

    Returns:
        Frontmatter; all fields None when there is no leading block

    Example:
        >>> parse_frontmatter("---\\npass-score: 75\\n---\\n").pass_threshold
        0.75
    """
    match = FRONTMATTER_RE.match(content)
    if not match:
        return Frontmatter()

    block = match.group(1)

    title = None
    title_match = _TITLE_RE.search(block)
    if title_match:
        title = re.sub(r"['\"]", "", title_match.group(1)).strip() or None

    time_limit = None
    time_match = _TIME_LIMIT_RE.search(block)
    if time_match:
        time_limit = int(time_match.group(1))

    pass_threshold = None
    pass_match = _PASS_SCORE_RE.search(block)
    if pass_match:
        score = int(pass_match.group(1))
        if score <= 100:
            pass_threshold = score / 100
        else:
            logger.warning(f"Ignoring pass-score {score}: must be a percentage 0-100")

    exam_range = None
    range_match = _EXAM_RANGE_RE.search(block)
    if range_match:
        exam_range = re.sub(r"['\"]", "", range_match.group(1)).strip() or None

    return Frontmatter(
        title=title,
        time_limit_minutes=time_limit,
        pass_threshold=pass_threshold,
        shuffle=_parse_flag(_SHUFFLE_RE, block),
        show_answer=_parse_flag(_SHOW_ANSWER_RE, block),
        exam_range=exam_range,
    )


def _parse_flag(pattern: re.Pattern[str], block: str) -> Optional[bool]:
    match = pattern.search(block)
    if not match:
        return None
    return match.group(1) == "true"
