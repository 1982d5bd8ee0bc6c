"""
Pattern finders producing fragments from documents.
"""

from .fragments import (
    CompositeFragmentProvider,
    Fragment,
    FragmentProvider,
    RegexGroup,
    SyntacticFragment,
    TextualFragment,
)
from .regex_pattern import PatternSyntaxError, RegexMatch, RegexMatcher, RegexPatternFinder
from .tree_pattern import (
    CONTINUE_MATCH_DESCENDANTS,
    SKIP_MATCH_DESCENDANTS,
    DescentPolicy,
    SyntaxTreePattern,
    TreePatternFinder,
)

__all__ = [
    "CompositeFragmentProvider",
    "Fragment",
    "FragmentProvider",
    "RegexGroup",
    "SyntacticFragment",
    "TextualFragment",
    "PatternSyntaxError",
    "RegexMatch",
    "RegexMatcher",
    "RegexPatternFinder",
    "CONTINUE_MATCH_DESCENDANTS",
    "SKIP_MATCH_DESCENDANTS",
    "DescentPolicy",
    "SyntaxTreePattern",
    "TreePatternFinder",
]
