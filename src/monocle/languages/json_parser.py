"""
JSON parser producing position-aware syntax trees.

Structure comes from the tree-sitter JSON grammar; string and number
literals are decoded with json.loads to get their exact Python values,
so anything json.loads rejects (`.5`, bad escapes, integers past the
conversion limit) makes the whole text invalid. Comments, which the
grammar tolerates, are rejected as well.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional, Union

import tree_sitter_json
from tree_sitter import Node

from .syntax_tree import ParseError, ParserContext, SyntaxTreeNode
from .tree_sitter_parser import SourceBytes, TreeSitterBackedParser, walk


class JsonSyntaxTreeNode(SyntaxTreeNode):
    """Base class of JSON nodes."""


def _decode_literal(node: Node, source: SourceBytes, kind: str) -> Any:
    text = source.node_text(node)
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseError(f"Invalid {kind} literal {text[:40]}: {e}", source.char_offset(node.start_byte)) from e


class StringNode(JsonSyntaxTreeNode):
    type = "String"

    def __init__(self, node: Node, source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.value: str = _decode_literal(node, source, "string")


class NumberNode(JsonSyntaxTreeNode):
    type = "Number"

    def __init__(self, node: Node, source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.value: Union[int, float] = _decode_literal(node, source, "number")


class BooleanNode(JsonSyntaxTreeNode):
    type = "Boolean"

    def __init__(self, node: Node, source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.value = node.type == "true"


class NullNode(JsonSyntaxTreeNode):
    type = "Null"

    def __init__(self, node: Node, source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.value = None


class PropertyNode(JsonSyntaxTreeNode):
    """A `"key": value` member of an object."""

    type = "Property"

    def __init__(self, node: Node, key: StringNode, value: JsonSyntaxTreeNode, context: ParserContext):
        super().__init__(node, context, key.start_offset, value.end_offset)
        self.key = key
        self.value = value

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return [self.key, self.value]


class ObjectNode(JsonSyntaxTreeNode):
    type = "Object"

    def __init__(self, node: Node, properties: List[PropertyNode], source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.properties = properties

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self.properties)

    @property
    def keys(self) -> List[str]:
        return [p.key.value for p in self.properties]

    def get_property(self, key: str) -> Optional[PropertyNode]:
        """Last property with the given key (later duplicates win, as in json.loads)."""
        for prop in reversed(self.properties):
            if prop.key.value == key:
                return prop
        return None


class ArrayNode(JsonSyntaxTreeNode):
    type = "Array"

    def __init__(self, node: Node, values: List[JsonSyntaxTreeNode], source: SourceBytes, context: ParserContext):
        super().__init__(node, context, *source.span(node))
        self.values = values

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self.values)


_LITERAL_CLASSES = {
    "string": StringNode,
    "number": NumberNode,
    "true": BooleanNode,
    "false": BooleanNode,
    "null": NullNode,
}


class _JsonConverter:
    """Converts tree-sitter JSON nodes into JsonSyntaxTreeNodes."""

    def __init__(self, source: SourceBytes, context: ParserContext):
        self._source = source
        self._context = context

    def _error(self, message: str, node: Node) -> ParseError:
        return ParseError(message, self._source.char_offset(node.start_byte))

    def convert_document(self, document: Node) -> JsonSyntaxTreeNode:
        for node in walk(document):
            if node.type == "comment":
                raise self._error("Comments are not allowed in JSON", node)
        values = document.named_children
        if not values:
            raise ParseError("Expected a value", len(self._context.text))
        if len(values) > 1:
            raise self._error(f"Unexpected trailing {self._source.node_text(values[1])[:20]!r}", values[1])
        return self._convert(values[0])

    def _convert(self, node: Node) -> JsonSyntaxTreeNode:
        if node.type == "object":
            properties = [self._convert_pair(pair) for pair in node.named_children]
            return ObjectNode(node, properties, self._source, self._context)
        if node.type == "array":
            values = [self._convert(value) for value in node.named_children]
            return ArrayNode(node, values, self._source, self._context)
        literal_class = _LITERAL_CLASSES.get(node.type)
        if literal_class is None:
            raise self._error(f"Unexpected {node.type}", node)
        return literal_class(node, self._source, self._context)

    def _convert_pair(self, pair: Node) -> PropertyNode:
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if pair.type != "pair" or key is None or value is None:
            raise self._error("Expected a property", pair)
        if key.type != "string":
            raise self._error("Property keys must be strings", key)
        return PropertyNode(
            pair,
            StringNode(key, self._source, self._context),
            self._convert(value),
            self._context,
        )


class JsonParser(TreeSitterBackedParser):
    language_id = "json"
    language_name = "JSON"

    @classmethod
    def grammar(cls) -> Any:
        return tree_sitter_json.language()

    def _convert_tree(self, root: Node, source: SourceBytes, context: ParserContext) -> SyntaxTreeNode:
        return _JsonConverter(source, context).convert_document(root)


def python_value(node: SyntaxTreeNode) -> Any:
    """Convert a JSON node (and its descendants) into the equivalent Python value."""
    if isinstance(node, ObjectNode):
        return {p.key.value: python_value(p.value) for p in node.properties}
    if isinstance(node, ArrayNode):
        return [python_value(v) for v in node.values]
    if isinstance(node, (StringNode, NumberNode, BooleanNode, NullNode)):
        return node.value
    raise TypeError(f"Not a JSON value node: {node!r}")
