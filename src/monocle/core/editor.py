"""
Document editor accumulating text edits and applying them as one batch.

Edits are expressed against the ranges of the document as it was when the
batch started; they are applied together, from the end of the text to its
start, so that no edit shifts the offsets of another.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List

from .documents import Document, Position, Range


logger = logging.getLogger(__name__)

DocumentObserver = Callable[[Document], None]


class EditKind(Enum):
    """Kinds of text edits."""
    REPLACE = "replace"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class TextEdit:
    """A single pending change to a document's text."""

    kind: EditKind
    range: Range
    text: str = ""

    @classmethod
    def replace(cls, range: Range, text: str) -> TextEdit:
        return cls(EditKind.REPLACE, range, text)

    @classmethod
    def insert(cls, position: Position, text: str) -> TextEdit:
        return cls(EditKind.INSERT, Range.from_single_position(position), text)

    @classmethod
    def delete(cls, range: Range) -> TextEdit:
        return cls(EditKind.DELETE, range, "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "range": str(self.range),
            "text": self.text,
        }


class DocumentEditor:
    """
    Accumulates replace/insert/delete operations on a document.

    Nothing changes until apply_edits() is called; the whole batch is then
    committed at once and every observer is notified exactly once with the
    new document.
    """

    def __init__(self, document: Document):
        self.document = document
        self._pending: List[TextEdit] = []
        self._observers: List[DocumentObserver] = []

    @property
    def pending_edits(self) -> List[TextEdit]:
        return list(self._pending)

    def add_observer(self, observer: DocumentObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: DocumentObserver) -> None:
        self._observers.remove(observer)

    def add_edit(self, edit: TextEdit) -> None:
        self._pending.append(edit)

    def replace(self, range: Range, new_text: str) -> None:
        self.add_edit(TextEdit.replace(range, new_text))

    def insert(self, position: Position, new_text: str) -> None:
        self.add_edit(TextEdit.insert(position, new_text))

    def delete(self, range: Range) -> None:
        self.add_edit(TextEdit.delete(range))

    def discard_edits(self) -> None:
        self._pending.clear()

    def _edited_content(self) -> str:
        """Compute the text resulting from the pending batch."""
        content = self.document.content
        located = [
            (
                self.document.position_to_offset(edit.range.start),
                self.document.position_to_offset(edit.range.end),
                index,
                edit,
            )
            for index, edit in enumerate(self._pending)
        ]
        located.sort(key=lambda item: (item[0], item[1], item[2]))

        # Insertions at the same point are allowed and keep their queued order.
        for (_, end, _, edit), (next_start, _, _, next_edit) in zip(located, located[1:]):
            if next_start < end:
                raise ValueError(f"Overlapping edits in batch: {edit.range} and {next_edit.range}")

        # Apply from the end so that earlier offsets stay valid.
        parts: List[str] = []
        cursor = len(content)
        for start, end, _, edit in reversed(located):
            parts.append(content[end:cursor])
            parts.append(edit.text)
            cursor = start
        parts.append(content[:cursor])
        return "".join(reversed(parts))

    def preview_diff(self, context_lines: int = 3) -> str:
        """Render the pending batch as a unified diff without applying it."""
        new_content = self._edited_content()
        diff = difflib.unified_diff(
            self.document.content.splitlines(keepends=True),
            new_content.splitlines(keepends=True),
            fromfile="before",
            tofile="after",
            n=context_lines,
        )
        return "".join(diff)

    def apply_edits(self) -> Document:
        """
        Commit the pending batch and return the new document.

        Raises:
            ValueError: if two edits of the batch overlap.
        """
        if not self._pending:
            return self.document

        new_content = self._edited_content()
        edit_count = len(self._pending)
        self._pending.clear()

        self.document = self.document.with_content(new_content)
        logger.info(f"Applied {edit_count} edit(s) to {self.document.language.id} document")

        for observer in list(self._observers):
            observer(self.document)

        return self.document
