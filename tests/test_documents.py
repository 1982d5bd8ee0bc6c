"""Tests for positions, ranges and documents."""
from __future__ import annotations

import pytest

from monocle.core.documents import Document, Position, Range
from monocle.languages.language import JSON_LANGUAGE, PLAIN_TEXT_LANGUAGE, Language


class TestPosition:
    def test_ordering_is_row_then_column(self) -> None:
        assert Position(0, 9) < Position(1, 0)
        assert Position(2, 1) < Position(2, 3)
        assert Position(1, 1) == Position(1, 1)

    def test_str(self) -> None:
        assert str(Position(3, 7)) == "3:7"

    def test_relative_to_same_row(self) -> None:
        assert Position(2, 10).relative_to(Position(2, 4)) == Position(0, 6)

    def test_relative_to_later_row_keeps_column(self) -> None:
        assert Position(5, 3).relative_to(Position(2, 4)) == Position(3, 3)


class TestOffsetToPositionConverter:
    def test_single_line(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("hello")
        assert convert(0) == Position(0, 0)
        assert convert(3) == Position(0, 3)
        assert convert(5) == Position(0, 5)

    def test_multiple_lines(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("ab\ncd\n\nef")
        assert convert(2) == Position(0, 2)
        assert convert(3) == Position(1, 0)
        assert convert(6) == Position(2, 0)
        assert convert(7) == Position(3, 0)
        assert convert(9) == Position(3, 2)

    def test_offset_after_trailing_line_break(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("a\n")
        assert convert(2) == Position(1, 0)

    def test_carriage_return_is_a_column(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("a\r\nb")
        assert convert(2) == Position(0, 2)
        assert convert(3) == Position(1, 0)

    def test_out_of_range_offsets_are_clamped(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("ab\ncd")
        assert convert(-4) == Position(0, 0)
        assert convert(100) == Position(1, 2)

    def test_empty_text(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("")
        assert convert(0) == Position(0, 0)

    def test_converter_is_reusable(self) -> None:
        convert = Position.get_offset_to_position_converter_for_text("x\ny\nz")
        results = [convert(offset) for offset in (4, 0, 2)]
        assert results == [Position(2, 0), Position(0, 0), Position(1, 0)]


class TestRange:
    def test_rejects_reversed_positions(self) -> None:
        with pytest.raises(ValueError):
            Range(Position(1, 0), Position(0, 5))

    def test_empty_range(self) -> None:
        assert Range.from_single_position(Position(2, 2)).is_empty
        assert not Range(Position(0, 0), Position(0, 1)).is_empty

    def test_from_unsorted_positions(self) -> None:
        r = Range.from_unsorted_positions(Position(3, 1), Position(1, 8))
        assert r.start == Position(1, 8)
        assert r.end == Position(3, 1)

    def test_from_offsets_in_text(self) -> None:
        r = Range.from_offsets_in_text("one\ntwo", 2, 6)
        assert r == Range(Position(0, 2), Position(1, 2))

    def test_from_offsets_in_text_rejects_reversed_offsets(self) -> None:
        with pytest.raises(ValueError):
            Range.from_offsets_in_text("abc", 2, 1)

    def test_relative_to(self) -> None:
        r = Range(Position(4, 6), Position(5, 2))
        assert r.relative_to(Position(4, 2)) == Range(Position(0, 4), Position(1, 2))

    def test_containment(self) -> None:
        outer = Range(Position(0, 0), Position(2, 0))
        inner = Range(Position(1, 0), Position(1, 5))
        assert outer.contains_range(inner)
        assert not inner.contains_range(outer)
        assert outer.contains_position(Position(2, 0))
        assert not inner.contains_position(Position(2, 0))

    def test_overlaps_ignores_touching_ranges(self) -> None:
        a = Range(Position(0, 0), Position(0, 3))
        b = Range(Position(0, 3), Position(0, 6))
        c = Range(Position(0, 2), Position(0, 4))
        assert not a.overlaps(b)
        assert a.overlaps(c)
        assert b.overlaps(c)

    def test_str(self) -> None:
        assert str(Range(Position(0, 1), Position(2, 3))) == "0:1-2:3"


class TestDocument:
    def test_is_empty(self) -> None:
        assert Document("", PLAIN_TEXT_LANGUAGE).is_empty
        assert not Document(" ", PLAIN_TEXT_LANGUAGE).is_empty

    def test_range_covers_whole_content(self) -> None:
        doc = Document("ab\ncde", PLAIN_TEXT_LANGUAGE)
        assert doc.range == Range(Position(0, 0), Position(1, 3))

    def test_position_to_offset(self) -> None:
        doc = Document("ab\ncde\n", PLAIN_TEXT_LANGUAGE)
        assert doc.position_to_offset(Position(0, 0)) == 0
        assert doc.position_to_offset(Position(1, 2)) == 5
        assert doc.position_to_offset(Position(2, 0)) == 7

    def test_position_to_offset_is_clamped(self) -> None:
        doc = Document("ab\ncde", PLAIN_TEXT_LANGUAGE)
        assert doc.position_to_offset(Position(0, 40)) == 2
        assert doc.position_to_offset(Position(9, 0)) == 6
        assert doc.position_to_offset(Position(-1, 0)) == 0

    def test_offsets_round_trip_through_positions(self) -> None:
        text = "{\n  \"a\": [1, 2],\n\n  \"b\": null\n}"
        doc = Document(text, JSON_LANGUAGE)
        for offset in range(len(text) + 1):
            assert doc.position_to_offset(doc.offset_to_position(offset)) == offset

    def test_get_content_in_range(self) -> None:
        doc = Document("first\nsecond", PLAIN_TEXT_LANGUAGE)
        assert doc.get_content_in_range(Range(Position(0, 3), Position(1, 3))) == "st\nsec"

    def test_with_content_keeps_language(self) -> None:
        doc = Document("{}", JSON_LANGUAGE)
        new_doc = doc.with_content("[]")
        assert new_doc.language is JSON_LANGUAGE
        assert new_doc.content == "[]"
        assert doc.content == "{}"

    def test_syntax_tree_is_cached(self) -> None:
        doc = Document("[1]", JSON_LANGUAGE)
        assert doc.syntax_tree is doc.syntax_tree

    def test_no_parser_means_no_tree(self) -> None:
        doc = Document("anything", Language("Unparsed", "unparsed", "plaintext"))
        assert doc.syntax_tree is None
