"""
Textual pattern finding with regular expressions and named groups.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple

from ..core.documents import Document, Range
from .fragments import RegexGroup, TextualFragment


logger = logging.getLogger(__name__)

# `(?<name>...)` and `\k<name>` are accepted as aliases of Python's
# `(?P<name>...)` and `(?P=name)`; look-behinds are left alone. Escape
# sequences are consumed as a whole so that `\\(?<n>` is still an alias.
_SYNTAX_ALIASES = re.compile(r"\\k<(\w+)>|\\.|\(\?<(?![=!])", re.DOTALL)


class PatternSyntaxError(ValueError):
    """Raised when a pattern is not a valid regular expression."""


@dataclass(frozen=True)
class RegexMatchGroup:
    name: str
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class RegexMatch:
    """A match of a RegexMatcher, located by character offsets."""

    text: str
    start: int
    end: int
    groups: Tuple[RegexMatchGroup, ...] = ()


def _rewrite_alias(match: re.Match) -> str:
    token = match.group()
    if match.group(1) is not None:
        return f"(?P={match.group(1)})"
    if token.startswith("\\"):
        return token
    return "(?P<"


def _to_python_syntax(pattern: str) -> str:
    return _SYNTAX_ALIASES.sub(_rewrite_alias, pattern)


class RegexMatcher:
    """
    Compiled regular expression finding every match in a text.

    Matching policy: matches are reported left to right and never overlap.
    After a zero-width match the scan restarts one character further, so
    every reported match starts at a distinct offset and the scan always
    terminates. Zero-width matches at offset 0 and at the end of the text
    are both reported.
    """

    def __init__(self, pattern: str, flags: int = 0):
        self.flags = flags
        self._compiled = self._compile(pattern)
        self._pattern = pattern

    def _compile(self, pattern: str) -> Pattern[str]:
        try:
            return re.compile(_to_python_syntax(pattern), self.flags)
        except re.error as e:
            raise PatternSyntaxError(f"Invalid regular expression {pattern!r}: {e}") from e

    @property
    def pattern(self) -> str:
        return self._pattern

    @pattern.setter
    def pattern(self, new_pattern: str) -> None:
        self._compiled = self._compile(new_pattern)
        self._pattern = new_pattern

    @property
    def group_names(self) -> List[str]:
        return list(self._compiled.groupindex)

    def match_all(self, text: str) -> List[RegexMatch]:
        matches: List[RegexMatch] = []
        named_groups = sorted(self._compiled.groupindex.items(), key=lambda item: item[1])
        pos = 0
        while pos <= len(text):
            m = self._compiled.search(text, pos)
            if m is None:
                break

            groups = tuple(
                RegexMatchGroup(name, m.group(index), m.start(index), m.end(index))
                for name, index in named_groups
                if m.start(index) != -1
            )
            matches.append(RegexMatch(m.group(), m.start(), m.end(), groups))
            pos = m.end() if m.end() > m.start() else m.end() + 1
        return matches


class RegexPatternFinder:
    """Finds every match of a regular expression in a document's text."""

    type = "Regex pattern finder"

    def __init__(self, pattern: str, flags: int = 0):
        self.regex_matcher = RegexMatcher(pattern, flags)

    @property
    def pattern(self) -> str:
        return self.regex_matcher.pattern

    @pattern.setter
    def pattern(self, new_pattern: str) -> None:
        self.regex_matcher.pattern = new_pattern

    def apply_in_document(self, document: Document) -> List[TextualFragment]:
        # If the document is empty, there is nothing to do.
        if document.is_empty:
            return []

        convert = document.offset_to_position
        fragments = [
            TextualFragment(
                document,
                Range(convert(match.start), convert(match.end)),
                match.text,
                tuple(
                    RegexGroup(group.name, group.value, Range(convert(group.start), convert(group.end)))
                    for group in match.groups
                ),
            )
            for match in self.regex_matcher.match_all(document.content)
        ]
        logger.debug(f"Pattern {self.pattern!r} matched {len(fragments)} time(s)")
        return fragments

    def provide_fragments_for_document(self, document: Document) -> List[TextualFragment]:
        return self.apply_in_document(document)
