"""
Structural pattern finding over syntax trees.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional, Union

from ..core.documents import Document
from ..languages.syntax_tree import SyntaxTree, SyntaxTreeNode
from .fragments import SyntacticFragment


logger = logging.getLogger(__name__)


class DescentPolicy(Enum):
    """What to do with the descendants of a node that matched."""
    CONTINUE_INTO_DESCENDANTS = "continue"
    SKIP_DESCENDANTS = "skip"


CONTINUE_MATCH_DESCENDANTS = DescentPolicy.CONTINUE_INTO_DESCENDANTS
SKIP_MATCH_DESCENDANTS = DescentPolicy.SKIP_DESCENDANTS

NodePredicate = Callable[[SyntaxTreeNode], bool]
DescentDecision = Union[DescentPolicy, Callable[[SyntaxTreeNode], DescentPolicy]]


class SyntaxTreePattern:
    """
    A predicate over syntax tree nodes, plus what to do after a match.

    `descent` is either a fixed policy or a function deciding it for each
    matched node.
    """

    def __init__(self, predicate: NodePredicate, descent: DescentDecision = CONTINUE_MATCH_DESCENDANTS):
        self.predicate = predicate
        self.descent = descent

    def matches(self, node: SyntaxTreeNode) -> bool:
        return bool(self.predicate(node))

    def descent_after_match(self, node: SyntaxTreeNode) -> DescentPolicy:
        if isinstance(self.descent, DescentPolicy):
            return self.descent
        return self.descent(node)

    @classmethod
    def for_node_type(cls, node_type: str, descent: DescentDecision = CONTINUE_MATCH_DESCENDANTS) -> SyntaxTreePattern:
        return cls(lambda node: node.type == node_type, descent)


class TreePatternFinder:
    """
    Finds the nodes of a document's syntax tree that match a pattern.

    The tree is walked in pre-order, so fragments come out in source order.
    Children of a matched node are only visited if the pattern's descent
    policy says so.
    """

    def __init__(self, pattern: SyntaxTreePattern):
        self.pattern = pattern

    def apply_to_tree(self, tree: SyntaxTree, document: Document) -> List[SyntacticFragment]:
        fragments: List[SyntacticFragment] = []
        stack: List[SyntaxTreeNode] = [tree.root]
        while stack:
            node = stack.pop()
            if self.pattern.matches(node):
                fragments.append(SyntacticFragment.from_node(node, document))
                if self.pattern.descent_after_match(node) is DescentPolicy.SKIP_DESCENDANTS:
                    continue
            stack.extend(reversed(node.child_nodes))
        return fragments

    def apply_in_document(self, document: Document) -> List[SyntacticFragment]:
        # If the document is empty, there is nothing to parse or match.
        if document.is_empty:
            return []

        tree: Optional[SyntaxTree] = document.syntax_tree
        if tree is None:
            logger.debug(f"Language {document.language.id} has no parser, no structural match possible")
            return []

        fragments = self.apply_to_tree(tree, document)
        logger.debug(f"Tree pattern matched {len(fragments)} node(s)")
        return fragments

    def provide_fragments_for_document(self, document: Document) -> List[SyntacticFragment]:
        return self.apply_in_document(document)
