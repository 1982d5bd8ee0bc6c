"""
Templates over CSS rules, where slots are the values of declarations.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from ..core.documents import Document, Range
from ..core.editor import TextEdit
from ..languages.css_parser import DeclarationBlockNode, DeclarationNode, RuleNode
from ..patterns.fragments import Fragment, SyntacticFragment
from ..patterns.tree_pattern import SKIP_MATCH_DESCENDANTS, SyntaxTreePattern, TreePatternFinder
from .template import SlotSpecification, Template, TemplateSlot, TemplateSlotKey


_LEADING_WHITESPACE = re.compile(r"[ \t]*")
_DEFAULT_INDENTATION = "    "


def _normalize_selector(selector: str) -> str:
    return " ".join(selector.split())


class CssRuleTemplate(Template):
    """
    Template whose fragments are CSS rules and whose slots are the values
    of their declarations (the last declaration wins for duplicated
    properties).

    Missing declarations are inserted after the last one, adding the `;`
    it may lack, or right after `{` in an empty block.
    """

    def __init__(self, fragment_provider: TreePatternFinder, slot_specification: SlotSpecification, **settings: Any):
        super().__init__(slot_specification, **settings)
        self.fragment_provider = fragment_provider

    @classmethod
    def create_for_selector(cls, selector: str, slot_specification: SlotSpecification, **settings: Any) -> CssRuleTemplate:
        normalized = _normalize_selector(selector)
        settings.setdefault("name", f"CSS rule {normalized!r}")
        pattern = SyntaxTreePattern(
            lambda node: isinstance(node, RuleNode) and node.selector.normalized == normalized,
            SKIP_MATCH_DESCENDANTS,
        )
        return cls(TreePatternFinder(pattern), slot_specification, **settings)

    @staticmethod
    def block_of(fragment: Fragment) -> DeclarationBlockNode:
        node = fragment.node if isinstance(fragment, SyntacticFragment) else None
        if not isinstance(node, RuleNode):
            raise TypeError(f"{fragment!r} does not hold a CSS rule")
        return node.block

    def _derive_slots(self, document: Document) -> List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]]:
        derived: List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]] = []
        for fragment in self.fragment_provider.provide_fragments_for_document(document):
            block = self.block_of(fragment)
            keys_to_slots: Dict[TemplateSlotKey, TemplateSlot] = {}
            for slot_key, valuator_provider in self.slot_specification.items():
                declaration = block.get_declaration(slot_key)
                if declaration is not None:
                    keys_to_slots[slot_key] = TemplateSlot(
                        slot_key,
                        declaration.value.text,
                        declaration.value.range,
                        document,
                        valuator_provider,
                    )
            derived.append((fragment, keys_to_slots))
        return derived

    def _insertion_edit(self, fragment: Fragment, key: TemplateSlotKey, text: str) -> TextEdit:
        document = fragment.document
        content = document.content
        block = self.block_of(fragment)
        declaration = f"{key}: {text};"
        is_multiline = "\n" in content[block.start_offset:block.end_offset]
        line_break = self.settings.line_break

        if block.declarations:
            last = block.declarations[-1]
            offset = last.end_offset
            separator = "" if last.has_semicolon else ";"
            if is_multiline:
                indent = self.settings.indentation
                if indent is None:
                    indent = self._line_indentation(content, last.start_offset)
                new_text = f"{separator}{line_break}{indent}{declaration}"
            else:
                new_text = f"{separator} {declaration}"
        else:
            offset = block.start_offset + 1
            if is_multiline:
                indent = self.settings.indentation
                if indent is None:
                    indent = self._line_indentation(content, block.end_offset - 1) + _DEFAULT_INDENTATION
                new_text = f"{line_break}{indent}{declaration}"
            else:
                new_text = f" {declaration} "

        return TextEdit.insert(document.offset_to_position(offset), new_text)

    def _deletion_edit(self, fragment: Fragment, slot: TemplateSlot) -> TextEdit:
        document = fragment.document
        content = document.content
        declaration: DeclarationNode = self.block_of(fragment).get_declaration(slot.key)

        start = declaration.start_offset
        end = declaration.end_offset
        while end < len(content) and content[end] in " \t":
            end += 1

        line_start = start
        while line_start > 0 and content[line_start - 1] in " \t":
            line_start -= 1
        alone_on_line = (line_start == 0 or content[line_start - 1] == "\n") and content[end:end + 1] == "\n"
        if alone_on_line:
            start, end = line_start, end + 1

        convert = document.offset_to_position
        return TextEdit.delete(Range(convert(start), convert(end)))

    @staticmethod
    def _line_indentation(text: str, offset: int) -> str:
        line_start = text.rfind("\n", 0, offset) + 1
        return _LEADING_WHITESPACE.match(text, line_start).group()
