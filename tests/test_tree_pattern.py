"""Tests for structural pattern finding."""
from __future__ import annotations

from monocle.core.documents import Document
from monocle.languages.language import JSON_LANGUAGE, MATHEMATICS_LANGUAGE, Language
from monocle.patterns.fragments import CompositeFragmentProvider, SyntacticFragment
from monocle.patterns.regex_pattern import RegexPatternFinder
from monocle.patterns.tree_pattern import (
    CONTINUE_MATCH_DESCENDANTS,
    SKIP_MATCH_DESCENDANTS,
    DescentPolicy,
    SyntaxTreePattern,
    TreePatternFinder,
)


NESTED_JSON = '{"a": {"b": {"c": 1}}, "d": {"e": 2}}'


def _texts(fragments) -> list:
    return [fragment.text for fragment in fragments]


class TestTreePatternFinder:
    def test_continue_reports_nested_matches_in_preorder(self) -> None:
        doc = Document(NESTED_JSON, JSON_LANGUAGE)
        finder = TreePatternFinder(SyntaxTreePattern.for_node_type("Object", CONTINUE_MATCH_DESCENDANTS))
        assert _texts(finder.apply_in_document(doc)) == [
            NESTED_JSON,
            '{"b": {"c": 1}}',
            '{"c": 1}',
            '{"e": 2}',
        ]

    def test_skip_hides_descendants_of_matches(self) -> None:
        doc = Document(NESTED_JSON, JSON_LANGUAGE)
        pattern = SyntaxTreePattern(
            lambda node: node.type == "Object" and node is not doc.syntax_tree.root,
            SKIP_MATCH_DESCENDANTS,
        )
        assert _texts(TreePatternFinder(pattern).apply_in_document(doc)) == ['{"b": {"c": 1}}', '{"e": 2}']

    def test_descent_decided_per_node(self) -> None:
        doc = Document("(1 + (2 + 3)) * (4 + 5)", MATHEMATICS_LANGUAGE)

        def descent(node) -> DescentPolicy:
            # only the outer sum is searched further
            return CONTINUE_MATCH_DESCENDANTS if node.text.startswith("1") else SKIP_MATCH_DESCENDANTS

        pattern = SyntaxTreePattern(lambda node: node.type == "Sum", descent)
        assert _texts(TreePatternFinder(pattern).apply_in_document(doc)) == ["1 + (2 + 3)", "2 + 3", "4 + 5"]

    def test_fragments_hold_matched_nodes(self) -> None:
        doc = Document("x^2 + y^3", MATHEMATICS_LANGUAGE)
        fragments = TreePatternFinder(SyntaxTreePattern.for_node_type("Exponent")).apply_in_document(doc)
        assert len(fragments) == 2
        assert all(isinstance(fragment, SyntacticFragment) for fragment in fragments)
        assert fragments[1].node.left_operand.name == "y"
        assert fragments[1].document is doc
        assert fragments[1].range == fragments[1].node.range

    def test_empty_document_has_no_fragments(self) -> None:
        doc = Document("", JSON_LANGUAGE)
        finder = TreePatternFinder(SyntaxTreePattern(lambda node: True))
        assert finder.apply_in_document(doc) == []

    def test_language_without_parser_has_no_fragments(self) -> None:
        doc = Document("{}", Language("Bare", "bare", "plaintext"))
        finder = TreePatternFinder(SyntaxTreePattern(lambda node: True))
        assert finder.apply_in_document(doc) == []

    def test_invalid_text_only_matches_error_node(self) -> None:
        doc = Document("{oops", JSON_LANGUAGE)
        fragments = TreePatternFinder(SyntaxTreePattern(lambda node: True)).apply_in_document(doc)
        assert [fragment.node.type for fragment in fragments] == ["Error"]

    def test_repeated_passes_are_identical_but_distinct(self) -> None:
        doc = Document(NESTED_JSON, JSON_LANGUAGE)
        finder = TreePatternFinder(SyntaxTreePattern.for_node_type("Number"))
        first = finder.provide_fragments_for_document(doc)
        second = finder.provide_fragments_for_document(doc)
        assert [f.range for f in first] == [f.range for f in second]
        assert first[0] is not second[0]
        assert first[0] != second[0]


class TestCompositeFragmentProvider:
    def test_merges_by_start_position(self) -> None:
        doc = Document('{"a": 1, "b": 22}', JSON_LANGUAGE)
        numbers = TreePatternFinder(SyntaxTreePattern.for_node_type("Number"))
        keys = RegexPatternFinder(r'"\w+"')
        fragments = CompositeFragmentProvider([numbers, keys]).provide_fragments_for_document(doc)
        assert _texts(fragments) == ['"a"', "1", '"b"', "22"]

    def test_ties_keep_provider_order(self) -> None:
        doc = Document("[7]", JSON_LANGUAGE)
        first = TreePatternFinder(SyntaxTreePattern.for_node_type("Number"))
        second = RegexPatternFinder(r"\d")
        fragments = CompositeFragmentProvider([first, second]).provide_fragments_for_document(doc)
        assert isinstance(fragments[0], SyntacticFragment)
        assert not isinstance(fragments[1], SyntacticFragment)
