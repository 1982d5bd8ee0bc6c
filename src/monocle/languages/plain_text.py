"""
Plain text fallback: a `Text` root with one `Line` child per line.
"""

from __future__ import annotations

from typing import List

from .syntax_tree import Parser, ParserContext, SyntaxTreeNode


class LineNode(SyntaxTreeNode):
    """A single line, without its line break."""

    type = "Line"

    def __init__(self, index: int, context: ParserContext, start_offset: int, end_offset: int):
        super().__init__(index, context, start_offset, end_offset)
        self.index = index


class TextNode(SyntaxTreeNode):
    type = "Text"

    def __init__(self, lines: List[LineNode], context: ParserContext):
        super().__init__(None, context, 0, len(context.text))
        self.lines = lines

    @property
    def child_nodes(self) -> List[SyntaxTreeNode]:
        return list(self.lines)


class PlainTextParser(Parser):
    language_id = "plaintext"

    def _parse(self, context: ParserContext) -> SyntaxTreeNode:
        lines: List[LineNode] = []
        start = 0
        for index, line in enumerate(context.text.split("\n")):
            lines.append(LineNode(index, context, start, start + len(line)))
            start += len(line) + 1
        return TextNode(lines, context)
