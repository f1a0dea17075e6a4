"""
Unit Tests for Document Stores
"""

import pytest

from cbt_toolkit.ledger import (
    DocumentNotFoundError,
    FileDocumentStore,
    MemoryDocumentStore,
    history_document_name,
)


@pytest.mark.parametrize(
    "quiz_name,expected",
    [
        ("cells.md", "cells-history.md"),
        ("biology/cells.md", "biology/cells-history.md"),
        ("notes.txt", "notes-history.md"),
        ("plain", "plain-history.md"),
    ],
)
def test_history_document_name_when_quiz_name_then_suffix_replaces_extension(quiz_name, expected):
    assert history_document_name(quiz_name) == expected


class TestFileDocumentStore:

    @pytest.fixture
    def store(self, tmp_path) -> FileDocumentStore:
        return FileDocumentStore(tmp_path)

    def test_write_when_nested_name_then_parents_created(self, store, tmp_path):
        store.write("a/b/doc.md", "hello\n")

        assert (tmp_path / "a" / "b" / "doc.md").read_text(encoding="utf-8") == "hello\n"
        assert store.exists("a/b/doc.md")

    def test_write_when_existing_then_overwritten(self, store):
        store.write("doc.md", "a much longer first version\n")
        store.write("doc.md", "short\n")

        assert store.read("doc.md") == "short\n"

    def test_modify_when_existing_then_modifier_applied(self, store):
        store.write("doc.md", "one\n")

        new_text = store.modify("doc.md", lambda text: text + "two\n")

        assert new_text == "one\ntwo\n"
        assert store.read("doc.md") == "one\ntwo\n"

    def test_read_when_missing_then_not_found(self, store):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            store.read("missing.md")

        assert exc_info.value.name == "missing.md"

    def test_modify_when_missing_then_not_found_and_not_created(self, store, tmp_path):
        with pytest.raises(DocumentNotFoundError):
            store.modify("missing.md", lambda text: text)

        assert not (tmp_path / "missing.md").exists()

    def test_read_optional_when_missing_then_none(self, store):
        assert store.read_optional("missing.md") is None

    def test_write_when_unicode_then_round_trips(self, store):
        store.write("doc.md", "Café → résumé\n")

        assert store.read("doc.md") == "Café → résumé\n"


class TestMemoryDocumentStore:

    def test_init_when_documents_given_then_copied(self):
        seed = {"doc.md": "x"}
        store = MemoryDocumentStore(seed)
        store.write("doc.md", "y")

        assert seed == {"doc.md": "x"}
        assert store.read("doc.md") == "y"

    def test_modify_when_missing_then_not_found(self):
        with pytest.raises(DocumentNotFoundError):
            MemoryDocumentStore().modify("missing.md", lambda text: text)
