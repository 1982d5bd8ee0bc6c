"""
Shared base of the parsers backed by tree-sitter grammars.

tree-sitter reports UTF-8 byte offsets; nodes built from its trees use
character offsets into the parsed text, so every span goes through a
SourceBytes conversion. Trees containing ERROR or MISSING nodes are
rejected as a whole.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from bisect import bisect_left
from typing import Any, ClassVar, Iterator, List, Optional

from tree_sitter import Language, Node
from tree_sitter import Parser as TreeSitterParser

from .syntax_tree import Parser, ParseError, ParserContext, SyntaxTreeNode


logger = logging.getLogger(__name__)


class SourceBytes:
    """The UTF-8 encoding of a text and the byte to character offset mapping."""

    def __init__(self, text: str):
        self.text = text
        self.encoded = text.encode("utf-8", errors="surrogatepass")
        self._char_starts: Optional[List[int]] = None
        if len(self.encoded) != len(text):
            starts = []
            position = 0
            for char in text:
                starts.append(position)
                code_point = ord(char)
                if code_point < 0x80:
                    position += 1
                elif code_point < 0x800:
                    position += 2
                elif code_point < 0x10000:
                    position += 3
                else:
                    position += 4
            starts.append(position)
            self._char_starts = starts

    def char_offset(self, byte_offset: int) -> int:
        if self._char_starts is None:
            return byte_offset
        return bisect_left(self._char_starts, byte_offset)

    def span(self, node: Node):
        """Character offsets of a tree-sitter node."""
        return self.char_offset(node.start_byte), self.char_offset(node.end_byte)

    def node_text(self, node: Node) -> str:
        start, end = self.span(node)
        return self.text[start:end]


def walk(node: Node) -> Iterator[Node]:
    """Iterate over a tree-sitter node and its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def first_error(node: Node) -> Optional[Node]:
    """First ERROR or MISSING node under a node, in source order."""
    for current in walk(node):
        if current.type == "ERROR" or current.is_missing:
            return current
    return None


class TreeSitterBackedParser(Parser):
    """
    Parser running a tree-sitter grammar, then converting the raw tree into
    the language's own node classes.

    Subclasses name their grammar and implement _convert_tree; the raw
    tree-sitter node of each converted node is kept as its parser_node.
    """

    language_name: ClassVar[str] = ""

    def __init__(self):
        self._parser: Optional[TreeSitterParser] = None

    @classmethod
    @abstractmethod
    def grammar(cls) -> Any:
        """The grammar's language object, as returned by its binding's language()."""

    def _tree_sitter_parser(self) -> TreeSitterParser:
        # Created on first use and reused for every later text
        if self._parser is None:
            self._parser = TreeSitterParser(Language(self.grammar()))
            logger.debug(f"Loaded tree-sitter grammar for {self.language_name}")
        return self._parser

    def _parse(self, context: ParserContext) -> SyntaxTreeNode:
        source = SourceBytes(context.text)
        tree = self._tree_sitter_parser().parse(source.encoded)
        root = tree.root_node
        if root.has_error:
            error = first_error(root)
            if error is None:
                raise ParseError(f"Invalid {self.language_name}")
            row, column = error.start_point
            problem = f"missing {error.type}" if error.is_missing else "syntax error"
            raise ParseError(
                f"Invalid {self.language_name}: {problem} at line {row + 1}, column {column + 1}",
                source.char_offset(error.start_byte),
            )
        return self._convert_tree(root, source, context)

    @abstractmethod
    def _convert_tree(self, root: Node, source: SourceBytes, context: ParserContext) -> SyntaxTreeNode:
        """Convert a tree-sitter tree free of errors into the root node."""
