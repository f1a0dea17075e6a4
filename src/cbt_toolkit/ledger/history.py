"""
Module: ledger.history

Purpose:
    Attempt ledger for one quiz, kept in its companion document.
    Attempts are only ever appended or deleted whole; a missing document
    is an empty history.

Key Classes:
    - HistoryStore: append / list / remove attempts

Dependencies:
    - ledger.documents: DocumentStore
    - ledger.markup: HistoryDocument edits
    - core.utils.serialization: Compact attempt codec

Used By:
    - controller.StudyController
    - cli
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from cbt_toolkit.core.models import ExamResult
from cbt_toolkit.core.schemas import ValidationError
from cbt_toolkit.core.utils import decompress_result, dumps_result, round_tenth

from .documents import DocumentNotFoundError, DocumentStore, history_document_name
from .markup import HistoryDocument, format_number, render_attempt_section, render_table_row

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class HistoryStore:
    """
    Append-only attempt ledger inside each quiz's companion document.

    Attributes:
        store: Document access
        today: Date source for the header's created/last-attempt dates

    Example:
        >>> history = HistoryStore(MemoryDocumentStore())
        >>> history.append("cells.md", result)
        >>> [r.session_id for r in history.list_attempts("cells.md")]
        ['3f2a9c1e-...']
    """

    def __init__(self, store: DocumentStore, today: Optional[Callable[[], date]] = None):
        self.store = store
        self.today = today or utc_today

    def append(self, quiz_name: str, result: ExamResult) -> None:
        """
        Record one attempt.

        Creates the companion document when it does not exist. Otherwise
        bumps the attempt counter, updates the last-score/date fields,
        inserts the table row at the top of the table and appends the
        detail section at the end.
        """
        name = history_document_name(quiz_name)
        payload = dumps_result(result)
        day = self.today()

        if not self.store.exists(name):
            document = HistoryDocument.create(quiz_name, result, payload, day)
            self.store.write(name, document.text)
            logger.debug(f"Created {name} with attempt {result.short_id}")
            return

        def add_attempt(text: str) -> str:
            document = HistoryDocument(text)
            document = (
                document.with_attempt_count(document.attempt_count + 1)
                .with_header_field("last-score", format_number(round_tenth(result.percentage)))
                .with_header_field("last-attempt-date", day.isoformat())
                .with_table_row(render_table_row(result))
                .with_attempt_section(render_attempt_section(result, payload))
            )
            return document.text

        self.store.modify(name, add_attempt)
        logger.debug(f"Appended attempt {result.short_id} to {name}")

    def list_attempts(self, quiz_name: str) -> List[ExamResult]:
        """
        All recorded attempts, newest first.

        Blocks that are not valid JSON or do not match the attempt schema
        are logged and skipped.

        Returns:
            Attempts ordered by timestamp descending; empty if the
            companion document does not exist
        """
        name = history_document_name(quiz_name)
        text = self.store.read_optional(name)
        if text is None:
            return []

        results: List[ExamResult] = []
        for block in HistoryDocument(text).session_blocks:
            try:
                results.append(decompress_result(json.loads(block.payload)))
            except (json.JSONDecodeError, ValidationError, ValueError) as e:
                logger.warning(f"Skipping unreadable attempt block at offset {block.start} in {name}: {e}")

        results.sort(key=lambda r: r.timestamp, reverse=True)
        return results

    def remove(self, quiz_name: str, session_id: str) -> bool:
        """
        Delete one attempt: its table row, its detail section, and one
        from the attempt counter (never below zero).

        Returns:
            True if the attempt was found and removed; False when the
            document is absent or holds no such attempt
        """
        name = history_document_name(quiz_name)
        short_id = session_id[:8]
        found = False

        def drop_attempt(text: str) -> str:
            nonlocal found
            document = HistoryDocument(text)
            if document.find_attempt_block(session_id) is None and not document.has_table_row(short_id):
                return text
            found = True
            document = (
                document.without_table_row(short_id)
                .without_attempt(session_id)
                .with_attempt_count(document.attempt_count - 1)
                .normalized()
            )
            return document.text

        try:
            self.store.modify(name, drop_attempt)
        except DocumentNotFoundError:
            return False

        if found:
            logger.debug(f"Removed attempt {short_id} from {name}")
        else:
            logger.debug(f"No attempt {short_id} in {name}")
        return found
