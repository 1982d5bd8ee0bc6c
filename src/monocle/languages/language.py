"""
Languages and the registry mapping language identifiers to them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from .css_parser import CssParser
from .json_parser import JsonParser
from .math_parser import MathParser
from .plain_text import PlainTextParser
from .python_parser import PythonParser
from .syntax_tree import Parser


@dataclass(frozen=True)
class Language:
    """
    A language documents can be written in.

    Languages without a parser only support textual (regex) pattern finding.
    """

    name: str
    id: str
    code_editor_language_id: str
    parser: Optional[Parser] = None

    @property
    def supports_structural_matching(self) -> bool:
        return self.parser is not None


JSON_LANGUAGE = Language("JSON", "json", "json", JsonParser())
CSS_LANGUAGE = Language("CSS", "css", "css", CssParser())
MATHEMATICS_LANGUAGE = Language("Mathematics", "math", "plaintext", MathParser())
PYTHON_LANGUAGE = Language("Python (subset)", "python", "python", PythonParser())
PLAIN_TEXT_LANGUAGE = Language("Plain text", "plaintext", "plaintext", PlainTextParser())

SUPPORTED_LANGUAGES = (
    JSON_LANGUAGE,
    CSS_LANGUAGE,
    MATHEMATICS_LANGUAGE,
    PYTHON_LANGUAGE,
    PLAIN_TEXT_LANGUAGE,
)


class LanguageRegistry:
    """Lookup table from language identifiers to languages."""

    def __init__(self, languages: Iterable[Language] = ()):
        self._languages: Dict[str, Language] = {}
        for language in languages:
            self.register(language)

    def register(self, language: Language) -> None:
        if language.id in self._languages:
            raise ValueError(f"A language with id {language.id!r} is already registered")
        self._languages[language.id] = language

    def get_language_with_id(self, language_id: str) -> Optional[Language]:
        return self._languages.get(language_id)

    @property
    def ids(self) -> List[str]:
        return list(self._languages)

    def __contains__(self, language_id: object) -> bool:
        return language_id in self._languages

    def __iter__(self) -> Iterator[Language]:
        return iter(self._languages.values())

    def __len__(self) -> int:
        return len(self._languages)


def create_default_registry() -> LanguageRegistry:
    """Build a new registry holding the built-in languages."""
    return LanguageRegistry(SUPPORTED_LANGUAGES)
