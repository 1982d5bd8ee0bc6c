"""
Monocle: find structural and textual patterns in documents and edit the
matched regions through typed template slots.
"""

from .core import Document, DocumentEditor, Position, Range, TextEdit
from .languages import Language, LanguageRegistry, create_default_registry

__version__ = "0.1.0"

__all__ = [
    "Document",
    "DocumentEditor",
    "Position",
    "Range",
    "TextEdit",
    "Language",
    "LanguageRegistry",
    "create_default_registry",
]
