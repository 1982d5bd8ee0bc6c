"""Tests for the batched document editor."""
from __future__ import annotations

from typing import List

import pytest

from monocle.core.documents import Document, Position, Range
from monocle.core.editor import DocumentEditor, EditKind, TextEdit
from monocle.languages.language import PLAIN_TEXT_LANGUAGE


def _editor(text: str) -> DocumentEditor:
    return DocumentEditor(Document(text, PLAIN_TEXT_LANGUAGE))


class TestTextEdit:
    def test_constructors(self) -> None:
        r = Range(Position(0, 1), Position(0, 3))
        assert TextEdit.replace(r, "x").kind is EditKind.REPLACE
        assert TextEdit.delete(r).text == ""
        insertion = TextEdit.insert(Position(1, 2), "y")
        assert insertion.kind is EditKind.INSERT
        assert insertion.range.is_empty

    def test_to_dict(self) -> None:
        edit = TextEdit.insert(Position(0, 0), "hi")
        assert edit.to_dict() == {"kind": "insert", "range": "0:0-0:0", "text": "hi"}


class TestDocumentEditor:
    def test_edits_are_pending_until_applied(self) -> None:
        editor = _editor("hello world")
        editor.replace(Range(Position(0, 0), Position(0, 5)), "howdy")
        assert editor.document.content == "hello world"
        assert len(editor.pending_edits) == 1

    def test_batch_uses_original_offsets(self) -> None:
        editor = _editor("aaa bbb ccc")
        editor.replace(Range(Position(0, 8), Position(0, 11)), "C")
        editor.replace(Range(Position(0, 0), Position(0, 3)), "AAAAA")
        editor.delete(Range(Position(0, 3), Position(0, 4)))
        doc = editor.apply_edits()
        assert doc.content == "AAAAAbbb C"
        assert editor.pending_edits == []

    def test_multiline_edits(self) -> None:
        editor = _editor("one\ntwo\nthree")
        editor.insert(Position(1, 0), "> ")
        editor.replace(Range(Position(2, 0), Position(2, 5)), "3")
        assert editor.apply_edits().content == "one\n> two\n3"

    def test_insertions_at_same_point_keep_order(self) -> None:
        editor = _editor("ac")
        editor.insert(Position(0, 1), "b")
        editor.insert(Position(0, 1), "B")
        assert editor.apply_edits().content == "abBc"

    def test_insertion_next_to_replacement(self) -> None:
        editor = _editor("abc")
        editor.replace(Range(Position(0, 1), Position(0, 2)), "X")
        editor.insert(Position(0, 1), "<")
        assert editor.apply_edits().content == "a<Xc"

    def test_overlapping_edits_are_rejected(self) -> None:
        editor = _editor("abcdef")
        editor.replace(Range(Position(0, 0), Position(0, 3)), "x")
        editor.delete(Range(Position(0, 2), Position(0, 4)))
        with pytest.raises(ValueError):
            editor.apply_edits()
        assert editor.document.content == "abcdef"

    def test_observers_notified_once_per_batch(self) -> None:
        editor = _editor("abc")
        seen: List[Document] = []
        editor.add_observer(seen.append)
        editor.insert(Position(0, 0), "1")
        editor.insert(Position(0, 3), "2")
        doc = editor.apply_edits()
        assert seen == [doc]

    def test_empty_batch_notifies_nobody(self) -> None:
        editor = _editor("abc")
        seen: List[Document] = []
        editor.add_observer(seen.append)
        assert editor.apply_edits() is editor.document
        assert seen == []

    def test_remove_observer(self) -> None:
        editor = _editor("abc")
        seen: List[Document] = []
        editor.add_observer(seen.append)
        editor.remove_observer(seen.append)
        editor.insert(Position(0, 0), "x")
        editor.apply_edits()
        assert seen == []

    def test_discard_edits(self) -> None:
        editor = _editor("abc")
        editor.insert(Position(0, 0), "x")
        editor.discard_edits()
        assert editor.apply_edits().content == "abc"

    def test_preview_diff_does_not_apply(self) -> None:
        editor = _editor("alpha\nbeta\n")
        editor.replace(Range(Position(1, 0), Position(1, 4)), "gamma")
        diff = editor.preview_diff()
        assert "-beta" in diff
        assert "+gamma" in diff
        assert editor.document.content == "alpha\nbeta\n"
        assert len(editor.pending_edits) == 1
