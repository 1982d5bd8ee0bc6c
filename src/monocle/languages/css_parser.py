"""
CSS parser built on the tree-sitter CSS grammar.

Only rules, declaration blocks and at-rules get their own node classes;
the inside of selectors, values and at-rule preludes is kept as plain
text spans. Comments are skipped.
"""

from __future__ import annotations

from typing import Any, List, Optional

import tree_sitter_css
from tree_sitter import Node

from .syntax_tree import ParseError, ParserContext, SyntaxTreeNode
from .tree_sitter_parser import SourceBytes, TreeSitterBackedParser


class CssSyntaxTreeNode(SyntaxTreeNode):
    """Base class of CSS nodes."""


class SelectorNode(CssSyntaxTreeNode):
    type = "Selector"

    @property
    def normalized(self) -> str:
        """Selector text with runs of whitespace collapsed."""
        return " ".join(self.text.split())


class PropertyNameNode(CssSyntaxTreeNode):
    type = "PropertyName"

    @property
    def name(self) -> str:
        return self.text


class PropertyValueNode(CssSyntaxTreeNode):
    type = "PropertyValue"

    @property
    def value(self) -> str:
        return self.text


class DeclarationNode(CssSyntaxTreeNode):
    """A `property: value` pair; its range includes the trailing `;` if any."""

    type = "Declaration"

    def __init__(
        self,
        node: Node,
        property: PropertyNameNode,
        value: PropertyValueNode,
        has_semicolon: bool,
        end_offset: int,
        context: ParserContext,
    ):
        super().__init__(node, context, property.start_offset, end_offset)
        self.property = property
        self.value = value
        self.has_semicolon = has_semicolon

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.property, self.value]


class DeclarationBlockNode(CssSyntaxTreeNode):
    """
    A `{ ... }` block of declarations, braces included. Nested rules and
    at-rules, as allowed by CSS nesting, are kept apart in `rules`.
    """

    type = "DeclarationBlock"

    def __init__(
        self,
        node: Node,
        declarations: List[DeclarationNode],
        rules: List[CssSyntaxTreeNode],
        start_offset: int,
        end_offset: int,
        context: ParserContext,
    ):
        super().__init__(node, context, start_offset, end_offset)
        self.declarations = declarations
        self.rules = rules

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return sorted([*self.declarations, *self.rules], key=lambda child: child.start_offset)

    def get_declaration(self, property_name: str) -> Optional[DeclarationNode]:
        """Last declaration of a property (the one that wins in the cascade)."""
        for declaration in reversed(self.declarations):
            if declaration.property.name == property_name:
                return declaration
        return None


class RuleNode(CssSyntaxTreeNode):
    type = "Rule"

    def __init__(self, node: Node, selector: SelectorNode, block: DeclarationBlockNode, context: ParserContext):
        super().__init__(node, context, selector.start_offset, block.end_offset)
        self.selector = selector
        self.block = block

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.selector, self.block]


class AtRulePreludeNode(CssSyntaxTreeNode):
    type = "AtRulePrelude"


class RuleListNode(CssSyntaxTreeNode):
    """A `{ ... }` block of an at-rule: nested rules (@media) or declarations (@font-face)."""

    type = "RuleList"

    def __init__(self, node: Node, items: List[CssSyntaxTreeNode], start_offset: int, end_offset: int, context: ParserContext):
        super().__init__(node, context, start_offset, end_offset)
        self.items = items

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self.items)


class AtRuleNode(CssSyntaxTreeNode):
    type = "AtRule"

    def __init__(
        self,
        node: Node,
        name: str,
        prelude: AtRulePreludeNode,
        rules: Optional[RuleListNode],
        start_offset: int,
        end_offset: int,
        context: ParserContext,
    ):
        super().__init__(node, context, start_offset, end_offset)
        self.name = name
        self.prelude = prelude
        self.rules = rules

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        if self.rules is None:
            return [self.prelude]
        return [self.prelude, self.rules]


class StylesheetNode(CssSyntaxTreeNode):
    type = "Stylesheet"

    def __init__(self, node: Node, items: List[CssSyntaxTreeNode], context: ParserContext):
        super().__init__(node, context, 0, len(context.text))
        self.items = items

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self.items)

    @property
    def rules(self) -> List[RuleNode]:
        """All style rules, including those nested in at-rules."""
        return [node for node in self.walk() if isinstance(node, RuleNode)]


_AT_RULE_BODIES = ("block", "keyframe_block_list")


def _significant(nodes: List[Node]) -> List[Node]:
    return [node for node in nodes if node.type != "comment"]


class _CssConverter:
    """Converts tree-sitter CSS nodes into CssSyntaxTreeNodes."""

    def __init__(self, source: SourceBytes, context: ParserContext):
        self._source = source
        self._context = context

    def _error(self, message: str, node: Node) -> ParseError:
        return ParseError(message, self._source.char_offset(node.start_byte))

    def convert_stylesheet(self, stylesheet: Node) -> StylesheetNode:
        items: List[CssSyntaxTreeNode] = []
        for child in _significant(stylesheet.named_children):
            if child.type == "declaration":
                raise self._error("Declaration outside of a rule", child)
            items.append(self._convert_item(child))
        return StylesheetNode(stylesheet, items, self._context)

    def _convert_item(self, node: Node) -> CssSyntaxTreeNode:
        if node.type in ("rule_set", "keyframe_block"):
            return self._convert_rule(node)
        if node.type == "declaration":
            return self._convert_declaration(node)
        if node.children and self._source.node_text(node.children[0]).startswith("@"):
            return self._convert_at_rule(node)
        raise self._error(f"Unexpected {node.type}", node)

    def _convert_rule(self, node: Node) -> RuleNode:
        children = _significant(node.children)
        if len(children) != 2 or children[1].type != "block":
            raise self._error("Expected a selector followed by a block", node)
        selector = SelectorNode(children[0], self._context, *self._source.span(children[0]))
        return RuleNode(node, selector, self._convert_block(children[1]), self._context)

    def _convert_block(self, block: Node) -> DeclarationBlockNode:
        declarations: List[DeclarationNode] = []
        rules: List[CssSyntaxTreeNode] = []
        for child in _significant(block.named_children):
            item = self._convert_item(child)
            if isinstance(item, DeclarationNode):
                declarations.append(item)
            else:
                rules.append(item)
        return DeclarationBlockNode(block, declarations, rules, *self._source.span(block), self._context)

    def _convert_declaration(self, node: Node) -> DeclarationNode:
        children = _significant(node.children)
        name = children[0]
        has_semicolon = children[-1].type == ";"
        value_children = children[2:-1] if has_semicolon else children[2:]
        if name.type != "property_name" or len(children) < 2 or children[1].type != ":" or not value_children:
            raise self._error("Expected `property: value`", node)

        property = PropertyNameNode(name, self._context, *self._source.span(name))
        value = PropertyValueNode(
            value_children,
            self._context,
            self._source.char_offset(value_children[0].start_byte),
            self._source.char_offset(value_children[-1].end_byte),
        )
        end = self._source.char_offset(node.end_byte) if has_semicolon else value.end_offset
        return DeclarationNode(node, property, value, has_semicolon, end, self._context)

    def _convert_at_rule(self, node: Node) -> AtRuleNode:
        children = _significant(node.children)
        keyword = children[0]
        body = children[-1] if len(children) > 1 and children[-1].type in _AT_RULE_BODIES else None
        terminated = body is not None or children[-1].type == ";"
        prelude_children = children[1:-1] if terminated else children[1:]

        if prelude_children:
            prelude_start = self._source.char_offset(prelude_children[0].start_byte)
            prelude_end = self._source.char_offset(prelude_children[-1].end_byte)
        else:
            prelude_start = prelude_end = self._source.char_offset(keyword.end_byte)
        prelude = AtRulePreludeNode(prelude_children, self._context, prelude_start, prelude_end)

        rules = None
        if body is not None:
            items = [self._convert_item(child) for child in _significant(body.named_children)]
            rules = RuleListNode(body, items, *self._source.span(body), self._context)

        return AtRuleNode(
            node,
            self._source.node_text(keyword),
            prelude,
            rules,
            *self._source.span(node),
            self._context,
        )


class CssParser(TreeSitterBackedParser):
    language_id = "css"
    language_name = "CSS"

    @classmethod
    def grammar(cls) -> Any:
        return tree_sitter_css.language()

    def _convert_tree(self, root: Node, source: SourceBytes, context: ParserContext) -> SyntaxTreeNode:
        return _CssConverter(source, context).convert_stylesheet(root)
