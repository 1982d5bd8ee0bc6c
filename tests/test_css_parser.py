"""Tests for the CSS parser."""
from __future__ import annotations

from monocle.languages.css_parser import AtRuleNode, CssParser, RuleNode, StylesheetNode


STYLESHEET = """\
/* header */
body, p  >  a {
    color: red;
    margin: 0 auto
}

@import url("x.css");

@media (max-width: 600px) {
    .small { font: 12px/1.5 "Open Sans", sans-serif; }
}
"""


class TestCssParser:
    def test_top_level_items(self) -> None:
        root = CssParser().parse(STYLESHEET).root
        assert isinstance(root, StylesheetNode)
        assert [item.type for item in root.items] == ["Rule", "AtRule", "AtRule"]

    def test_rule_selector_and_declarations(self) -> None:
        root = CssParser().parse(STYLESHEET).root
        rule = root.items[0]
        assert isinstance(rule, RuleNode)
        assert rule.selector.text == "body, p  >  a"
        assert rule.selector.normalized == "body, p > a"

        color, margin = rule.block.declarations
        assert color.property.name == "color"
        assert color.value.value == "red"
        assert color.has_semicolon
        assert color.text == "color: red;"
        assert margin.value.value == "0 auto"
        assert not margin.has_semicolon
        assert margin.text == "margin: 0 auto"

    def test_at_rules(self) -> None:
        root = CssParser().parse(STYLESHEET).root
        import_rule, media = root.items[1], root.items[2]
        assert isinstance(import_rule, AtRuleNode)
        assert import_rule.name == "@import"
        assert import_rule.prelude.text == 'url("x.css")'
        assert import_rule.rules is None

        assert media.prelude.text == "(max-width: 600px)"
        assert [item.type for item in media.rules.items] == ["Rule"]

    def test_values_with_strings_and_separators(self) -> None:
        root = CssParser().parse(STYLESHEET).root
        nested = root.rules[1]
        assert nested.selector.text == ".small"
        declaration = nested.block.get_declaration("font")
        assert declaration.value.value == '12px/1.5 "Open Sans", sans-serif'

    def test_rules_include_nested_rules(self) -> None:
        root = CssParser().parse(STYLESHEET).root
        assert [rule.selector.normalized for rule in root.rules] == ["body, p > a", ".small"]

    def test_last_declaration_wins(self) -> None:
        root = CssParser().parse("a { color: red; color: blue; }").root
        assert root.rules[0].block.get_declaration("color").value.value == "blue"
        assert root.rules[0].block.get_declaration("margin") is None

    def test_semicolon_inside_string_value(self) -> None:
        root = CssParser().parse('a { content: "x;y"; }').root
        assert root.rules[0].block.get_declaration("content").value.value == '"x;y"'

    def test_children_nest_in_parent_ranges(self) -> None:
        tree = CssParser().parse(STYLESHEET)
        for node in tree.walk():
            for child in node.child_nodes:
                assert node.range.contains_range(child.range)

    def test_empty_stylesheet(self) -> None:
        tree = CssParser().parse("  /* nothing */ ")
        assert not tree.is_error
        assert tree.root.child_nodes == []

    def test_unterminated_block_is_an_error(self) -> None:
        assert CssParser().parse("a { color: red;").is_error

    def test_stray_closing_brace_is_an_error(self) -> None:
        assert CssParser().parse("a { } }").is_error

    def test_missing_colon_is_an_error(self) -> None:
        assert CssParser().parse("a { color red; }").is_error

    def test_escaped_backslash_closes_string(self) -> None:
        tree = CssParser().parse('a { content: "\\\\"; color: red; }')
        assert not tree.is_error
        block = tree.root.rules[0].block
        assert block.get_declaration("content").value.value == '"\\\\"'
        assert block.get_declaration("color").value.value == "red"

    def test_at_rule_with_declarations(self) -> None:
        root = CssParser().parse('@font-face { font-family: "X"; src: url(x.woff); }').root
        font_face = root.items[0]
        assert isinstance(font_face, AtRuleNode)
        assert font_face.name == "@font-face"
        assert font_face.prelude.range.is_empty
        assert [item.type for item in font_face.rules.items] == ["Declaration", "Declaration"]

    def test_important_is_part_of_the_value(self) -> None:
        root = CssParser().parse("a { color: red !important }").root
        declaration = root.rules[0].block.get_declaration("color")
        assert declaration.value.value == "red !important"
        assert not declaration.has_semicolon
