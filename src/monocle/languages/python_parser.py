"""
Python parser built on the tree-sitter Python grammar.

The grammar's tree is converted into a small, closed set of node variants
(NamedAccess, FunctionCall, Identifier, ...); constructs outside that set
become `Other` nodes that keep the name of their grammar node type.
Grouping nodes without meaning of their own (statement wrappers, blocks,
argument and parameter lists, parentheses) are flattened into their
parent.
"""

from __future__ import annotations

import ast
from typing import Any, Dict, List, Optional, Type

import tree_sitter_python
from tree_sitter import Node

from .syntax_tree import ParseError, ParserContext, SyntaxTreeNode
from .tree_sitter_parser import SourceBytes, TreeSitterBackedParser, walk


class PythonSyntaxTreeNode(SyntaxTreeNode):
    """Base class of Python nodes."""

    def __init__(
        self,
        parser_node: Optional[Node],
        context: ParserContext,
        start_offset: int,
        end_offset: int,
        children: Optional[List[PythonSyntaxTreeNode]] = None,
    ):
        super().__init__(parser_node, context, start_offset, end_offset)
        self._children: List[PythonSyntaxTreeNode] = children or []
        self.cover(self._children)

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self._children)


class ModuleNode(PythonSyntaxTreeNode):
    type = "Module"


class AssignmentNode(PythonSyntaxTreeNode):
    type = "Assignment"


class FunctionDefinitionNode(PythonSyntaxTreeNode):
    type = "FunctionDefinition"


class ClassDefinitionNode(PythonSyntaxTreeNode):
    type = "ClassDefinition"


class ReturnNode(PythonSyntaxTreeNode):
    type = "Return"


class ImportNode(PythonSyntaxTreeNode):
    type = "Import"


class FunctionCallNode(PythonSyntaxTreeNode):
    type = "FunctionCall"

    @property
    def callee(self) -> PythonSyntaxTreeNode:
        return self._children[0]

    @property
    def arguments(self) -> List[PythonSyntaxTreeNode]:
        return self._children[1:]


class KeywordArgumentNode(PythonSyntaxTreeNode):
    type = "KeywordArgument"


class NamedAccessNode(PythonSyntaxTreeNode):
    """`expression.identifier`"""

    type = "NamedAccess"

    @property
    def expression(self) -> PythonSyntaxTreeNode:
        return self._children[0]

    @property
    def identifier(self) -> IdentifierNode:
        return self._children[-1]


class IndexedAccessNode(PythonSyntaxTreeNode):
    """`expression[index]`"""

    type = "IndexedAccess"


class IdentifierNode(PythonSyntaxTreeNode):
    type = "Identifier"


class StringNode(PythonSyntaxTreeNode):
    type = "String"


class NumberNode(PythonSyntaxTreeNode):
    type = "Number"


class BooleanNode(PythonSyntaxTreeNode):
    type = "Boolean"


class NoneNode(PythonSyntaxTreeNode):
    type = "None"


class ListNode(PythonSyntaxTreeNode):
    type = "List"


class TupleNode(PythonSyntaxTreeNode):
    type = "Tuple"


class DictionaryNode(PythonSyntaxTreeNode):
    type = "Dictionary"


class BinaryOperationNode(PythonSyntaxTreeNode):
    type = "BinaryOperation"


class ComparisonNode(PythonSyntaxTreeNode):
    type = "Comparison"


class OtherNode(PythonSyntaxTreeNode):
    """Any construct outside the supported subset."""

    type = "Other"


_NODE_CLASSES: Dict[str, Type[PythonSyntaxTreeNode]] = {
    "module": ModuleNode,
    "assignment": AssignmentNode,
    "augmented_assignment": AssignmentNode,
    "function_definition": FunctionDefinitionNode,
    "class_definition": ClassDefinitionNode,
    "return_statement": ReturnNode,
    "import_statement": ImportNode,
    "import_from_statement": ImportNode,
    "future_import_statement": ImportNode,
    "call": FunctionCallNode,
    "keyword_argument": KeywordArgumentNode,
    "attribute": NamedAccessNode,
    "subscript": IndexedAccessNode,
    "identifier": IdentifierNode,
    "list": ListNode,
    "tuple": TupleNode,
    "expression_list": TupleNode,
    "pattern_list": TupleNode,
    "dictionary": DictionaryNode,
    "binary_operator": BinaryOperationNode,
    "comparison_operator": ComparisonNode,
}

_FLATTENED_TYPES = frozenset({
    "expression_statement",
    "block",
    "parameters",
    "lambda_parameters",
    "argument_list",
    "decorator",
    "parenthesized_expression",
    "pair",
    "type",
})

_SKIPPED_TYPES = frozenset({"comment", "line_continuation"})

# Nodes whose `name` field becomes an attribute instead of a child
_NAMED_TYPES = frozenset({"function_definition", "class_definition", "keyword_argument"})

_STRING_TYPES = frozenset({"string", "concatenated_string"})
_NUMBER_TYPES = frozenset({"integer", "float"})


class _PythonConverter:
    """Converts tree-sitter Python nodes into PythonSyntaxTreeNodes."""

    def __init__(self, source: SourceBytes, context: ParserContext):
        self._source = source
        self._context = context

    def convert_module(self, module: Node) -> ModuleNode:
        return ModuleNode(module, self._context, 0, len(self._context.text), self._convert_children(module))

    def _convert_children(self, node: Node, skipped: Optional[Node] = None) -> List[PythonSyntaxTreeNode]:
        children: List[PythonSyntaxTreeNode] = []
        for child in node.named_children:
            if child.type in _SKIPPED_TYPES or (skipped is not None and child == skipped):
                continue
            if child.type in _FLATTENED_TYPES:
                children.extend(self._convert_children(child))
            else:
                children.append(self._convert(child))
        return children

    def _convert(self, node: Node) -> PythonSyntaxTreeNode:
        start, end = self._source.span(node)

        if node.type in _STRING_TYPES:
            return self._convert_string(node, start, end)
        if node.type in _NUMBER_TYPES:
            number = NumberNode(node, self._context, start, end)
            number.value = self._literal_value(node)
            return number
        if node.type in ("true", "false"):
            boolean = BooleanNode(node, self._context, start, end)
            boolean.value = node.type == "true"
            return boolean
        if node.type == "none":
            none = NoneNode(node, self._context, start, end)
            none.value = None
            return none
        if node.type == "decorated_definition":
            return self._convert_decorated_definition(node, start, end)

        node_class = _NODE_CLASSES.get(node.type, OtherNode)
        name_node = node.child_by_field_name("name") if node.type in _NAMED_TYPES else None
        converted = node_class(node, self._context, start, end, self._convert_children(node, skipped=name_node))

        if node_class is IdentifierNode:
            converted.name = self._source.node_text(node)
        elif name_node is not None:
            converted.name = self._source.node_text(name_node)
        elif node_class is OtherNode:
            converted.construct = node.type
        return converted

    def _convert_decorated_definition(self, node: Node, start: int, end: int) -> PythonSyntaxTreeNode:
        definition = node.child_by_field_name("definition")
        if definition is None:
            raise ParseError("Decorators without a definition", start)
        decorators = [child for child in node.named_children if child.type == "decorator"]

        converted = self._convert(definition)
        children: List[PythonSyntaxTreeNode] = []
        for decorator in decorators:
            children.extend(self._convert_children(decorator))
        children.extend(converted._children)

        decorated = type(converted)(node, self._context, start, end, children)
        decorated.name = converted.name
        return decorated

    def _convert_string(self, node: Node, start: int, end: int) -> StringNode:
        string = StringNode(node, self._context, start, end)
        is_formatted = any(
            part.type == "string_start" and "f" in self._source.node_text(part).lower()
            for part in walk(node)
        )
        string.value = None if is_formatted else self._literal_value(node)
        return string

    def _literal_value(self, node: Node) -> Any:
        text = self._source.node_text(node)
        try:
            return ast.literal_eval(text)
        except (SyntaxError, ValueError) as e:
            raise ParseError(f"Invalid literal {text[:40]}: {e}", self._source.char_offset(node.start_byte)) from e


class PythonParser(TreeSitterBackedParser):
    language_id = "python"
    language_name = "Python"

    @classmethod
    def grammar(cls) -> Any:
        return tree_sitter_python.language()

    def _convert_tree(self, root: Node, source: SourceBytes, context: ParserContext) -> SyntaxTreeNode:
        return _PythonConverter(source, context).convert_module(root)
