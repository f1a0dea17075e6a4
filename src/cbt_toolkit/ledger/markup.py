"""
Module: ledger.markup

Purpose:
    The companion document format. A history document is ordinary
    human-readable markup that doubles as a small database:

        ---                                 header (key: value lines)
        source: "quizzes/cells.md"
        attempts: 2
        ...
        ---

        # Exam History: quizzes/cells.md

        | ID | Date | Score | Duration | Status |    attempt table,
        | :--- | :--- | :--- | :--- | :--- |         newest row first
        | 3f2a9c1e | ... | 85.0% (17/20) | 5m 3s | PASS |

        ## Attempt: ...                      one section per attempt
        > <!-- SESSION_DATA_START -->         quoted, sentinel-delimited
        > ```json                             compact JSON record
        > {"id":...}
        > ```
        > <!-- SESSION_DATA_END -->

        ---

        > [!example]- Performance Data        at most one cached index
        > <!-- PERFORMANCE_DATA_START -->
        > ...
        > <!-- PERFORMANCE_DATA_END -->

    All marker and quoting rules live here. HistoryDocument wraps the text
    and exposes one method per edit; each returns a new document and
    touches only the region it owns, leaving user prose intact.

Key Classes:
    - SentinelBlock: Located data block (span + unquoted payload)
    - HistoryDocument: Immutable document with structured accessors/edits

Key Functions:
    - quote_lines() / unquote_lines(): Per-line ``> `` prefix handling
    - render_table_row(), render_attempt_section(), render_performance_block()
    - find_performance_payload(): Extract the cached index JSON

Used By:
    - ledger.history
    - ledger.performance_store
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Dict, List, Optional

from cbt_toolkit.core.models import ExamResult
from cbt_toolkit.core.models.results import Number
from cbt_toolkit.core.utils import round_tenth


# ─────────────────────────────────────────────────────────────────────────────
# Markers
# ─────────────────────────────────────────────────────────────────────────────

SESSION_DATA_START = "<!-- SESSION_DATA_START -->"
SESSION_DATA_END = "<!-- SESSION_DATA_END -->"
PERFORMANCE_DATA_START = "<!-- PERFORMANCE_DATA_START -->"
PERFORMANCE_DATA_END = "<!-- PERFORMANCE_DATA_END -->"

PERFORMANCE_HEADING = "> [!example]- Performance Data"
ATTEMPT_HEADING = "## Attempt:"
TABLE_HEADER = "| ID | Date | Score | Duration | Status |"
TABLE_DIVIDER = "| :--- | :--- | :--- | :--- | :--- |"

_QUOTE_PREFIX_RE = re.compile(r"^(?:>\s*)+")
_SESSION_BLOCK_RE = re.compile(
    r"(?:>\s*)*<!-- SESSION_DATA_START -->\s*(?:>\s*)*```json\s*([\s\S]*?)"
    r"\s*(?:>\s*)*```\s*(?:>\s*)*<!-- SESSION_DATA_END -->"
)
_PERFORMANCE_BLOCK_RE = re.compile(r"\n*> \[!example\]- Performance Data\n(?:>.*\n)*")
_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*(?:>\s*)*```")
_HEADER_RE = re.compile(r"\A---\n([\s\S]*?)\n---")
_HEADER_FIELD_RE = re.compile(r"^([\w-]+):[ \t]*(.*)$", re.MULTILINE)
_TABLE_START_RE = re.compile(
    r"^\|[ \t]*ID[ \t]*\|[^\n]*\|[ \t]*Status[ \t]*\|[ \t]*\n\|[^\n]*(?:\n|\Z)",
    re.MULTILINE,
)
_SECTION_RULE_RE = re.compile(r"\s*\n---[ \t]*$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ─────────────────────────────────────────────────────────────────────────────
# Quoting
# ─────────────────────────────────────────────────────────────────────────────

def quote_lines(text: str) -> str:
    """Prefix every line with ``> `` so it renders inside a callout."""
    return "\n".join(f"> {line}" for line in text.split("\n"))


def unquote_lines(text: str) -> str:
    """
    Remove leading quote markers (any depth) from every line.

    Example:
        >>> unquote_lines('> {"a":\\n> > 1}')
        '{"a":\\n1}'
    """
    return "\n".join(_QUOTE_PREFIX_RE.sub("", line) for line in text.split("\n"))


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────

def format_duration(seconds: float) -> str:
    """
    Format a duration as ``Nm Ss`` (whole seconds, truncated).

    Example:
        >>> format_duration(303.9)
        '5m 3s'
    """
    return f"{int(seconds // 60)}m {int(seconds % 60)}s"


def format_number(value: Number) -> str:
    """Render a score without a spurious ``.0``."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def format_attempt_date(result: ExamResult) -> str:
    return result.recorded_at.strftime("%Y-%m-%d %H:%M")


def render_table_row(result: ExamResult) -> str:
    """
    One attempt table row.

    Example:
        ``| 3f2a9c1e | 2024-05-01 14:03 | 85.0% (17/20) | 5m 3s | PASS |``
    """
    score = (
        f"{round_tenth(result.percentage):.1f}% "
        f"({format_number(result.total_score)}/{format_number(result.max_score)})"
    )
    status = "PASS" if result.is_pass else "FAIL"
    return (
        f"| {result.short_id} | {format_attempt_date(result)} | {score} "
        f"| {format_duration(result.duration_seconds)} | {status} |"
    )


def render_attempt_section(result: ExamResult, payload: str) -> str:
    """
    Detail section for one attempt, wrapping its compact JSON payload.

    Args:
        result: Attempt (used for the human-readable summary)
        payload: Compact JSON record

    Returns:
        Section text, starting and ending with a newline
    """
    return (
        f"\n{ATTEMPT_HEADING} {format_attempt_date(result)}\n"
        f"> [!info] Summary\n"
        f"> Score: {format_number(result.total_score)}/{format_number(result.max_score)}"
        f" | Correct: {round_tenth(result.percentage):.1f}%"
        f" | Time: {format_duration(result.duration_seconds)}\n"
        f"\n"
        f"> [!abstract]- Raw Session Data\n"
        f"> {SESSION_DATA_START}\n"
        f"> ```json\n"
        f"{quote_lines(payload)}\n"
        f"> ```\n"
        f"> {SESSION_DATA_END}\n"
        f"\n"
        f"---\n"
    )


def render_performance_block(payload: str) -> str:
    """Collapsible performance-data block wrapping a compact JSON payload."""
    return (
        f"\n\n{PERFORMANCE_HEADING}\n"
        f"> {PERFORMANCE_DATA_START}\n"
        f"> ```json\n"
        f"{quote_lines(payload)}\n"
        f"> ```\n"
        f"> {PERFORMANCE_DATA_END}\n"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Block Location
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SentinelBlock:
    """
    A located data block.

    Attributes:
        start: Offset of the first character of the block (quote markers included)
        end: Offset just past the end marker
        payload: Enclosed JSON text with quote markers removed
    """

    start: int
    end: int
    payload: str


def find_session_blocks(text: str) -> List[SentinelBlock]:
    """Locate every attempt block, in document order."""
    return [
        SentinelBlock(match.start(), match.end(), unquote_lines(match.group(1)))
        for match in _SESSION_BLOCK_RE.finditer(text)
    ]


def find_performance_payload(text: str) -> Optional[str]:
    """
    Extract the cached performance JSON.

    The last start marker wins, so stray copies of the marker earlier in
    the document are ignored.

    Returns:
        Unquoted JSON text, or None if either marker or the fenced JSON is missing
    """
    start = text.rfind(PERFORMANCE_DATA_START)
    if start == -1:
        return None
    end = text.find(PERFORMANCE_DATA_END, start)
    if end == -1:
        return None

    fenced = _FENCED_JSON_RE.search(text, start + len(PERFORMANCE_DATA_START), end)
    if not fenced:
        return None
    return unquote_lines(fenced.group(1)).strip()


# ─────────────────────────────────────────────────────────────────────────────
# Document Model
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HistoryDocument:
    """
    Companion document text with structured accessors and edits.

    Every edit returns a new HistoryDocument; the original is unchanged.

    Example:
        >>> doc = HistoryDocument(text)
        >>> doc = doc.with_attempt_count(doc.attempt_count + 1)
        >>> doc.text
    """

    text: str

    @classmethod
    def create(
        cls,
        source: str,
        result: ExamResult,
        payload: str,
        today: date,
    ) -> HistoryDocument:
        """New document holding a single attempt."""
        day = today.isoformat()
        return cls(
            f"---\n"
            f'source: "{source}"\n'
            f"created: {day}\n"
            f"attempts: 1\n"
            f"last-score: {format_number(round_tenth(result.percentage))}\n"
            f"last-attempt-date: {day}\n"
            f"---\n"
            f"\n"
            f"# Exam History: {source}\n"
            f"\n"
            f"{TABLE_HEADER}\n"
            f"{TABLE_DIVIDER}\n"
            f"{render_table_row(result)}\n"
            f"\n"
            f"{render_attempt_section(result, payload)}"
        )

    # ── Header ──────────────────────────────────────────────────────────────

    def _header_span(self) -> Optional[tuple[int, int]]:
        match = _HEADER_RE.match(self.text)
        if not match:
            return None
        return match.span(1)

    @property
    def header_fields(self) -> Dict[str, str]:
        """Header ``key: value`` pairs (values as written, quotes kept)."""
        span = self._header_span()
        if span is None:
            return {}
        block = self.text[span[0]:span[1]]
        return {m.group(1): m.group(2).strip() for m in _HEADER_FIELD_RE.finditer(block)}

    @property
    def attempt_count(self) -> int:
        value = self.header_fields.get("attempts", "")
        return int(value) if value.isdigit() else 0

    def with_header_field(self, key: str, value: str) -> HistoryDocument:
        """Overwrite an existing header field; absent fields are left absent."""
        span = self._header_span()
        if span is None:
            return self
        start, end = span
        pattern = re.compile(rf"^{re.escape(key)}:[ \t]*.*$", re.MULTILINE)
        block, count = pattern.subn(f"{key}: {value}", self.text[start:end], count=1)
        if not count:
            return self
        return replace(self, text=self.text[:start] + block + self.text[end:])

    def with_attempt_count(self, count: int) -> HistoryDocument:
        return self.with_header_field("attempts", str(max(0, count)))

    # ── Table ───────────────────────────────────────────────────────────────

    @property
    def table_rows(self) -> List[str]:
        """Attempt rows, in document order (newest first)."""
        match = _TABLE_START_RE.search(self.text)
        if not match:
            return []
        rows = []
        for line in self.text[match.end():].split("\n"):
            if not line.startswith("|"):
                break
            rows.append(line)
        return rows

    def with_table_row(self, row: str) -> HistoryDocument:
        """
        Insert a row directly under the table divider.

        A document with no attempt table gets a fresh one appended.
        """
        match = _TABLE_START_RE.search(self.text)
        if not match:
            table = f"\n\n{TABLE_HEADER}\n{TABLE_DIVIDER}\n{row}\n"
            return replace(self, text=self.text.rstrip("\n") + table)

        at = match.end()
        prefix = self.text[:at]
        if not prefix.endswith("\n"):
            prefix += "\n"
        return replace(self, text=f"{prefix}{row}\n{self.text[at:]}")

    def without_table_row(self, short_id: str) -> HistoryDocument:
        pattern = re.compile(
            rf"^\|[ \t]*{re.escape(short_id)}[ \t]*\|.*\|[ \t]*(?:\n|\Z)", re.MULTILINE
        )
        return replace(self, text=pattern.sub("", self.text, count=1))

    def has_table_row(self, short_id: str) -> bool:
        return any(
            row.strip("| \t").split("|")[0].strip() == short_id for row in self.table_rows
        )

    # ── Attempt sections ────────────────────────────────────────────────────

    @property
    def session_blocks(self) -> List[SentinelBlock]:
        return find_session_blocks(self.text)

    def with_attempt_section(self, section: str) -> HistoryDocument:
        return replace(self, text=self.text + section)

    def find_attempt_block(self, session_id: str) -> Optional[SentinelBlock]:
        """Block whose JSON record carries ``session_id``, if any."""
        id_pattern = re.compile(rf'"id":\s*"{re.escape(session_id)}"')
        for block in self.session_blocks:
            if id_pattern.search(block.payload):
                return block
        return None

    def without_attempt(self, session_id: str) -> HistoryDocument:
        """
        Delete one attempt's whole section.

        The section runs from its ``## Attempt:`` heading (when present after
        the previous block) through the ``---`` rule following the block.
        Without those, only the block itself is removed.
        """
        blocks = self.session_blocks
        target = self.find_attempt_block(session_id)
        if target is None:
            return self

        floor = max((b.end for b in blocks if b.end <= target.start), default=0)
        start = self.text.rfind(ATTEMPT_HEADING, floor, target.start)
        if start == -1:
            start = target.start

        end = target.end
        rule = _SECTION_RULE_RE.match(self.text, end)
        if rule:
            end = rule.end()

        return replace(self, text=self.text[:start] + self.text[end:])

    # ── Performance block ───────────────────────────────────────────────────

    def without_performance_block(self) -> HistoryDocument:
        return replace(self, text=_PERFORMANCE_BLOCK_RE.sub("", self.text))

    def with_performance_block(self, block: str) -> HistoryDocument:
        """Replace any cached performance block with ``block``, at the end."""
        stripped = self.without_performance_block().text.rstrip()
        return replace(self, text=stripped + block)

    # ── Whitespace ──────────────────────────────────────────────────────────

    def normalized(self) -> HistoryDocument:
        """Collapse runs of blank lines to one and trim surrounding whitespace."""
        return replace(self, text=_BLANK_RUN_RE.sub("\n\n", self.text).strip() + "\n")
