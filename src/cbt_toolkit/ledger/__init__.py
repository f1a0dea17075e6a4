"""
Module: ledger

Purpose:
    Persistence of attempts and the cached performance index inside each
    quiz's human-readable companion document (``<quiz>-history.md``).

Key Classes:
    - DocumentStore, FileDocumentStore, MemoryDocumentStore
    - HistoryStore: Attempt ledger
    - PerformanceStore: Performance cache
    - HistoryDocument: Marker/quoting rules and document edits
"""

from .documents import (
    DocumentNotFoundError,
    DocumentStore,
    FileDocumentStore,
    MemoryDocumentStore,
    history_document_name,
)
from .history import HistoryStore
from .markup import HistoryDocument
from .performance_store import PerformanceStore

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "FileDocumentStore",
    "MemoryDocumentStore",
    "history_document_name",
    "HistoryStore",
    "HistoryDocument",
    "PerformanceStore",
]
