"""
Fragments: located matches produced by pattern finders.

A fragment is only meaningful for the exact Document it was found in.
Fragments compare and hash by identity so that they can key per-pass
mappings (see templates).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from ..core.documents import Document, Range
from ..languages.syntax_tree import SyntaxTreeNode


@dataclass(frozen=True, eq=False)
class Fragment:
    """A located match in a document."""

    document: Document
    range: Range

    @property
    def text(self) -> str:
        return self.document.get_content_in_range(self.range)


@dataclass(frozen=True, eq=False)
class SyntacticFragment(Fragment):
    """A match found by walking a syntax tree; `node` is the matched node."""

    node: Optional[SyntaxTreeNode] = None

    @classmethod
    def from_node(cls, node: SyntaxTreeNode, document: Document) -> SyntacticFragment:
        return cls(document, node.range, node)


@dataclass(frozen=True)
class RegexGroup:
    """A named capture group that took part in a regex match."""

    name: str
    value: str
    range: Range


@dataclass(frozen=True, eq=False)
class TextualFragment(Fragment):
    """A regex match: the matched text and its participating named groups."""

    matched_text: str = ""
    groups: Tuple[RegexGroup, ...] = ()

    @property
    def text(self) -> str:
        return self.matched_text

    def group(self, name: str) -> Optional[RegexGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    @property
    def group_names(self) -> List[str]:
        return [group.name for group in self.groups]


class FragmentProvider(Protocol):
    """Anything able to find fragments in a document."""

    def provide_fragments_for_document(self, document: Document) -> Sequence[Fragment]:
        ...


class CompositeFragmentProvider:
    """Merges the fragments of several providers, ordered by position."""

    def __init__(self, providers: Sequence[FragmentProvider]):
        self.providers = list(providers)

    def provide_fragments_for_document(self, document: Document) -> List[Fragment]:
        fragments: List[Fragment] = []
        for provider in self.providers:
            fragments.extend(provider.provide_fragments_for_document(document))
        # sort() is stable: fragments starting at the same place keep provider order
        fragments.sort(key=lambda fragment: fragment.range.start)
        return fragments
