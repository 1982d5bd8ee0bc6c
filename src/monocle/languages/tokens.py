"""
Regex-driven tokenizer and token cursor for the math expression parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Collection, List, Optional, Pattern, Sequence, Tuple

from .syntax_tree import ParseError


TokenPatterns = Sequence[Tuple[str, Pattern[str]]]


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    start: int
    end: int


def compile_token_patterns(patterns: Sequence[Tuple[str, str]]) -> TokenPatterns:
    return [(kind, re.compile(pattern)) for kind, pattern in patterns]


def tokenize(text: str, patterns: TokenPatterns, skip: Collection[str] = ("WHITESPACE",)) -> List[Token]:
    """
    Split a text into tokens, trying each pattern in order at every offset.

    Tokens whose kind is in `skip` are dropped. An EOF token is always
    appended at the end of the text.

    Raises:
        ParseError: if no pattern matches at some offset.
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        for kind, pattern in patterns:
            m = pattern.match(text, pos)
            if m and m.end() > pos:
                if kind not in skip:
                    tokens.append(Token(kind, m.group(), pos, m.end()))
                pos = m.end()
                break
        else:
            raise ParseError(f"Unexpected character {text[pos]!r}", pos)
    tokens.append(Token("EOF", "", len(text), len(text)))
    return tokens


class TokenCursor:
    """Sequential access to a token list for recursive descent parsers."""

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._pos = 0

    def peek(self, lookahead: int = 0) -> Token:
        index = min(self._pos + lookahead, len(self._tokens) - 1)
        return self._tokens[index]

    def advance(self) -> Token:
        token = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return token

    def accept(self, kind: str, value: Optional[str] = None) -> Optional[Token]:
        """Consume the next token if it has the given kind (and value)."""
        token = self.peek()
        if token.kind == kind and (value is None or token.value == value):
            return self.advance()
        return None

    def expect(self, kind: str, value: Optional[str] = None) -> Token:
        token = self.accept(kind, value)
        if token is None:
            found = self.peek()
            expected = value if value is not None else kind
            raise ParseError(f"Expected {expected}, got {found.kind} ({found.value!r})", found.start)
        return token

    @property
    def at_end(self) -> bool:
        return self.peek().kind == "EOF"
