"""
Document model: positions, ranges and immutable documents.

Positions are zero-based (row, column) pairs. Ranges are half-open spans
between two positions. A Document pairs a text with the language it is
written in and is never mutated; edits produce a new Document.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from ..languages.language import Language
    from ..languages.syntax_tree import SyntaxTree


OffsetToPositionConverter = Callable[[int], "Position"]


def _line_start_offsets(text: str) -> List[int]:
    """Offsets at which each line of the text starts."""
    starts = [0]
    offset = text.find("\n")
    while offset != -1:
        starts.append(offset + 1)
        offset = text.find("\n", offset + 1)
    return starts


def _clamp(offset: int, length: int) -> int:
    return max(0, min(offset, length))


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based (row, column) location in a text."""

    row: int
    column: int

    def __str__(self) -> str:
        return f"{self.row}:{self.column}"

    def relative_to(self, origin: Position) -> Position:
        """Express this position in a frame whose (0, 0) is the origin."""
        if self.row == origin.row:
            return Position(0, self.column - origin.column)
        return Position(self.row - origin.row, self.column)

    @staticmethod
    def get_offset_to_position_converter_for_text(text: str) -> OffsetToPositionConverter:
        """
        Build a reusable offset -> position converter for a text.

        The text is scanned once for line breaks; each conversion is then a
        binary search over the line starts. Offsets outside the text are
        clamped to its bounds.
        """
        line_starts = _line_start_offsets(text)
        length = len(text)

        def convert(offset: int) -> Position:
            offset = _clamp(offset, length)
            row = bisect_right(line_starts, offset) - 1
            return Position(row, offset - line_starts[row])

        return convert


@dataclass(frozen=True)
class Range:
    """A half-open span of text between two positions (start <= end)."""

    start: Position
    end: Position

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} is before its start {self.start}")

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def relative_to(self, origin: Position) -> Range:
        return Range(self.start.relative_to(origin), self.end.relative_to(origin))

    def contains_position(self, position: Position) -> bool:
        return self.start <= position <= self.end

    def contains_range(self, other: Range) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: Range) -> bool:
        """Check whether the two ranges share at least one character."""
        return self.start < other.end and other.start < self.end

    @classmethod
    def from_single_position(cls, position: Position) -> Range:
        return cls(position, position)

    @classmethod
    def from_unsorted_positions(cls, first: Position, second: Position) -> Range:
        """Build a range from two positions given in any order (e.g. a user selection)."""
        return cls(min(first, second), max(first, second))

    @classmethod
    def from_offsets_in_text(cls, text: str, start_offset: int, end_offset: int) -> Range:
        """
        Build a range from two character offsets into a text.

        Reversed offsets are a caller error and raise ValueError; use
        from_unsorted_positions for input whose order is not known.
        """
        if start_offset > end_offset:
            raise ValueError(f"Start offset {start_offset} is after end offset {end_offset}")

        convert = Position.get_offset_to_position_converter_for_text(text)
        return cls(convert(start_offset), convert(end_offset))


@dataclass(frozen=True)
class Document:
    """
    An immutable text written in a given language.

    Replacing the content means building a new Document (see with_content);
    anything derived from a Document (syntax tree, fragments, slots) is only
    valid for that exact Document.
    """

    content: str
    language: Language

    @property
    def is_empty(self) -> bool:
        return len(self.content) == 0

    @property
    def range(self) -> Range:
        """Range covering the whole content."""
        return Range(Position(0, 0), self.offset_to_position(len(self.content)))

    @cached_property
    def _line_starts(self) -> List[int]:
        return _line_start_offsets(self.content)

    @cached_property
    def offset_to_position(self) -> OffsetToPositionConverter:
        return Position.get_offset_to_position_converter_for_text(self.content)

    @cached_property
    def syntax_tree(self) -> Optional[SyntaxTree]:
        """Syntax tree of the content, or None if the language has no parser."""
        parser = self.language.parser
        if parser is None:
            return None
        return parser.parse(self.content)

    def position_to_offset(self, position: Position) -> int:
        """Convert a position back into a character offset (clamped to the text)."""
        line_starts = self._line_starts
        if position.row < 0:
            return 0
        if position.row >= len(line_starts):
            return len(self.content)

        line_start = line_starts[position.row]
        if position.row + 1 < len(line_starts):
            line_end = line_starts[position.row + 1] - 1
        else:
            line_end = len(self.content)
        return max(line_start, min(line_start + position.column, line_end))

    def get_content_in_range(self, range: Range) -> str:
        return self.content[self.position_to_offset(range.start):self.position_to_offset(range.end)]

    def with_content(self, content: str) -> Document:
        """Create a new Document with the same language and a new content."""
        return Document(content, self.language)
