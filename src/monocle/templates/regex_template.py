"""
Templates whose slots are the named groups of a regular expression.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..core.documents import Document
from ..core.editor import TextEdit
from ..patterns.fragments import Fragment
from ..patterns.regex_pattern import RegexPatternFinder
from .template import SlotInsertionError, SlotSpecification, Template, TemplateSlot, TemplateSlotKey


class RegexPatternTemplate(Template):
    """
    One fragment per regex match, one slot per named group.

    A declared slot whose group did not take part in a match is absent from
    that fragment. Since a bare regex has no structure to insert into,
    missing slots cannot be inserted and slots cannot be deleted.
    """

    def __init__(self, pattern: str, slot_specification: SlotSpecification, flags: int = 0, **settings: Any):
        super().__init__(slot_specification, **settings)
        self.regex_pattern_finder = RegexPatternFinder(pattern, flags)

    def _derive_slots(self, document: Document) -> List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]]:
        derived: List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]] = []
        for fragment in self.regex_pattern_finder.apply_in_document(document):
            keys_to_slots: Dict[TemplateSlotKey, TemplateSlot] = {}
            for slot_key, valuator_provider in self.slot_specification.items():
                # Each declared slot is bound to the group with the same name, if it matched.
                group = fragment.group(slot_key)
                if group is not None:
                    keys_to_slots[slot_key] = TemplateSlot(
                        slot_key,
                        group.value,
                        group.range,
                        document,
                        valuator_provider,
                    )
            derived.append((fragment, keys_to_slots))
        return derived

    def _insertion_edit(self, fragment: Fragment, key: TemplateSlotKey, text: str) -> TextEdit:
        raise SlotInsertionError(f"{self.settings.name}: cannot insert missing slot {key!r} into a regex match")

    def _deletion_edit(self, fragment: Fragment, slot: TemplateSlot) -> TextEdit:
        raise SlotInsertionError(f"{self.settings.name}: cannot delete slot {slot.key!r} from a regex match")
