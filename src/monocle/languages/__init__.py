"""
Supported languages, their parsers and the shared syntax tree abstraction.
"""

from .language import (
    CSS_LANGUAGE,
    JSON_LANGUAGE,
    MATHEMATICS_LANGUAGE,
    PLAIN_TEXT_LANGUAGE,
    PYTHON_LANGUAGE,
    SUPPORTED_LANGUAGES,
    Language,
    LanguageRegistry,
    create_default_registry,
)
from .syntax_tree import ErrorNode, Parser, ParseError, ParserContext, SyntaxTree, SyntaxTreeNode

__all__ = [
    "CSS_LANGUAGE",
    "JSON_LANGUAGE",
    "MATHEMATICS_LANGUAGE",
    "PLAIN_TEXT_LANGUAGE",
    "PYTHON_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "Language",
    "LanguageRegistry",
    "create_default_registry",
    "ErrorNode",
    "Parser",
    "ParseError",
    "ParserContext",
    "SyntaxTree",
    "SyntaxTreeNode",
]
