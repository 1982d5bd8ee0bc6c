"""
Core document handling: positions, ranges, documents and batched edits.
"""

from .documents import Document, Position, Range
from .editor import DocumentEditor, EditKind, TextEdit

__all__ = [
    "Document",
    "Position",
    "Range",
    "DocumentEditor",
    "EditKind",
    "TextEdit",
]
