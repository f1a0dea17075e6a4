"""
Module: ledger.performance_store

Purpose:
    Cache one compacted performance index inside a quiz's companion
    document. The cache is disposable: when it is missing, stale or
    unreadable, callers rebuild it from the attempt history.

Key Classes:
    - PerformanceStore: write / read the cached index

Dependencies:
    - ledger.markup: Performance block rendering and extraction
    - core.utils.serialization: Performance codec

Used By:
    - controller.StudyController
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Optional

from cbt_toolkit.core.models import PerformanceIndex
from cbt_toolkit.core.schemas import ValidationError
from cbt_toolkit.core.utils import compress_performance, decompress_performance

from .documents import DocumentNotFoundError, DocumentStore, history_document_name
from .markup import HistoryDocument, find_performance_payload, render_performance_block

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class PerformanceStore:
    """
    Cached performance index in the companion document.

    Attributes:
        store: Document access
        clock: Millisecond timestamp source for ``updatedAt``
    """

    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], int]] = None):
        self.store = store
        self.clock = clock or now_ms

    def write(self, quiz_name: str, index: PerformanceIndex) -> bool:
        """
        Replace the cached index.

        Any earlier performance block is removed and the new one appended
        at the end of the document. Nothing is written when the companion
        document does not exist.

        Returns:
            True if the block was written
        """
        name = history_document_name(quiz_name)
        data = compress_performance(index, updated_at=self.clock())
        block = render_performance_block(
            json.dumps(data, ensure_ascii=False, separators=(",", ":"))
        )

        try:
            self.store.modify(name, lambda text: HistoryDocument(text).with_performance_block(block).text)
        except DocumentNotFoundError:
            logger.debug(f"No {name}; performance cache not written")
            return False

        logger.debug(f"Cached performance for {len(index)} questions in {name}")
        return True

    def read(self, quiz_name: str) -> Optional[PerformanceIndex]:
        """
        Read the cached index.

        Returns:
            The index, or None when the document, either marker or a
            parseable payload is missing
        """
        name = history_document_name(quiz_name)
        text = self.store.read_optional(name)
        if text is None:
            return None

        payload = find_performance_payload(text)
        if payload is None:
            return None

        try:
            return decompress_performance(json.loads(payload))
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning(f"Ignoring unreadable performance cache in {name}: {e}")
            return None
