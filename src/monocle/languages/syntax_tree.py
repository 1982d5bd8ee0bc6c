"""
Language-agnostic syntax tree abstraction.

Every language defines its own closed set of node classes, all deriving
from SyntaxTreeNode. Code that walks or matches trees only relies on the
shared surface: type, range, text and child_nodes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Iterator, List, Optional, Sequence

from ..core.documents import OffsetToPositionConverter, Position, Range


logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised by a parser implementation when its input cannot be parsed."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


@dataclass(frozen=True)
class ParserContext:
    """State shared by all the nodes built while parsing one text."""

    text: str
    offset_to_position: OffsetToPositionConverter

    @classmethod
    def for_text(cls, text: str) -> ParserContext:
        return cls(text, Position.get_offset_to_position_converter_for_text(text))

    def range_from_offsets(self, start_offset: int, end_offset: int) -> Range:
        return Range(self.offset_to_position(start_offset), self.offset_to_position(end_offset))


class SyntaxTreeNode(ABC):
    """
    Base class of all syntax tree nodes.

    A node knows the offsets of the text it was parsed from, its range in
    that text and its children in source order. The parser_node attribute
    keeps whatever the underlying parser produced for debugging; matching
    code never reads it.
    """

    type: ClassVar[str] = "Node"

    def __init__(self, parser_node: Any, context: ParserContext, start_offset: int, end_offset: int):
        self.parser_node = parser_node
        self._context = context
        self.start_offset = start_offset
        self.end_offset = end_offset
        self.range = context.range_from_offsets(start_offset, end_offset)

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return []

    @property
    def text(self) -> str:
        return self._context.text[self.start_offset:self.end_offset]

    @property
    def is_leaf(self) -> bool:
        return not self.child_nodes

    def walk(self) -> Iterator[SyntaxTreeNode]:
        """Iterate over this node and all its descendants in pre-order."""
        stack: List[SyntaxTreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes))

    def cover(self, nodes: Sequence[SyntaxTreeNode]) -> None:
        """Widen this node's span so that it contains all the given nodes."""
        if not nodes:
            return
        self.start_offset = min(self.start_offset, *(node.start_offset for node in nodes))
        self.end_offset = max(self.end_offset, *(node.end_offset for node in nodes))
        self.range = self._context.range_from_offsets(self.start_offset, self.end_offset)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type} {self.range}>"


class ErrorNode(SyntaxTreeNode):
    """Single leaf standing for a whole text that could not be parsed."""

    type = "Error"

    def __init__(self, message: str, context: ParserContext):
        super().__init__(None, context, 0, len(context.text))
        self.message = message


class SyntaxTree:
    """A parsed text and the root node of its syntax tree."""

    def __init__(self, root: SyntaxTreeNode, text: str):
        self.root = root
        self.text = text

    @property
    def is_error(self) -> bool:
        return isinstance(self.root, ErrorNode)

    def walk(self) -> Iterator[SyntaxTreeNode]:
        return self.root.walk()

    def __repr__(self) -> str:
        return f"<SyntaxTree root={self.root!r}>"


class Parser(ABC):
    """
    Turns a text into a syntax tree.

    parse() never raises on malformed input: implementations signal failures
    with ParseError and the text is then wrapped into a single ErrorNode.
    """

    language_id: ClassVar[str] = ""

    def parse(self, text: str) -> SyntaxTree:
        context = ParserContext.for_text(text)
        try:
            root = self._parse(context)
        except (ParseError, RecursionError) as e:
            logger.warning(f"{type(self).__name__} could not parse text: {e}")
            root = ErrorNode(str(e), context)
        return SyntaxTree(root, text)

    @abstractmethod
    def _parse(self, context: ParserContext) -> SyntaxTreeNode:
        """Parse the context's text and return the root node."""
