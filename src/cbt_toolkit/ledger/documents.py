"""
Module: ledger.documents

Purpose:
    Named text document access. The ledger only ever needs "read document
    by name" and "write/update document by name"; this module defines that
    port and two implementations.

Key Classes:
    - DocumentStore: Abstract document access
    - FileDocumentStore: Documents as UTF-8 files under a root directory
    - MemoryDocumentStore: Dict-backed store for tests and embedding
    - DocumentNotFoundError: Named document does not exist

Key Functions:
    - history_document_name(): Quiz name → companion document name

Used By:
    - ledger.history, ledger.performance_store
    - controller.StudyController
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Optional, Union

from .file_locking import locked_read_modify_write_text, locked_write_text

HISTORY_SUFFIX = "-history.md"


class DocumentNotFoundError(LookupError):
    """Named document does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Document not found: {name}")
        self.name = name


def history_document_name(quiz_name: str) -> str:
    """
    Name of the companion document holding a quiz's ledger.

    The quiz's extension is replaced with ``-history.md``; the directory
    part is kept.

    Example:
        >>> history_document_name("biology/cells.md")
        'biology/cells-history.md'
    """
    path = PurePosixPath(quiz_name)
    return str(path.with_name(f"{path.stem}{HISTORY_SUFFIX}"))


class DocumentStore(ABC):
    """
    Abstract access to named text documents.

    Implementations must raise DocumentNotFoundError from read() and
    modify() when the document does not exist.
    """

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Whether the named document exists."""

    @abstractmethod
    def read(self, name: str) -> str:
        """
        Read a document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """

    @abstractmethod
    def write(self, name: str, text: str) -> None:
        """Create or overwrite a document."""

    @abstractmethod
    def modify(self, name: str, modifier: Callable[[str], str]) -> str:
        """
        Replace a document's text with ``modifier(text)``.

        Returns:
            The new text

        Raises:
            DocumentNotFoundError: If the document does not exist
        """

    def read_optional(self, name: str) -> Optional[str]:
        """Read a document, or None if it does not exist."""
        try:
            return self.read(name)
        except DocumentNotFoundError:
            return None


class FileDocumentStore(DocumentStore):
    """
    Documents stored as UTF-8 files under a root directory.

    Writes and modifications hold an exclusive portalocker lock on the
    file, so separate processes on one machine do not interleave a
    read/modify/write.

    Example:
        >>> store = FileDocumentStore(Path("~/notes").expanduser())
        >>> store.read("quizzes/cells.md")
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> str:
        try:
            return self.path_for(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise DocumentNotFoundError(name) from None

    def write(self, name: str, text: str) -> None:
        locked_write_text(self.path_for(name), text)

    def modify(self, name: str, modifier: Callable[[str], str]) -> str:
        try:
            return locked_read_modify_write_text(self.path_for(name), modifier)
        except FileNotFoundError:
            raise DocumentNotFoundError(name) from None


class MemoryDocumentStore(DocumentStore):
    """In-memory document store with the same semantics as FileDocumentStore."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents: Dict[str, str] = dict(documents or {})

    def exists(self, name: str) -> bool:
        return name in self.documents

    def read(self, name: str) -> str:
        try:
            return self.documents[name]
        except KeyError:
            raise DocumentNotFoundError(name) from None

    def write(self, name: str, text: str) -> None:
        self.documents[name] = text

    def modify(self, name: str, modifier: Callable[[str], str]) -> str:
        text = modifier(self.read(name))
        self.documents[name] = text
        return text
