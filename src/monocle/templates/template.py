"""
Templates bind the fragments found in a document to named, typed slots.

Every compute pass builds a brand new fragment -> slots mapping and swaps
it in at once; slots and fragments of a previous pass are never patched.
Any edit of the document invalidates them, so the template must be
recomputed after every applied edit (see Template.bind).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..core.documents import Document, Range
from ..core.editor import DocumentEditor, TextEdit
from ..patterns.fragments import Fragment
from .valuators import Valuator, ValuatorProvider


logger = logging.getLogger(__name__)

TemplateSlotKey = str
SlotSpecification = Mapping[TemplateSlotKey, ValuatorProvider]


class SlotInsertionError(ValueError):
    """Raised when a template cannot insert or delete a slot."""


class TemplateSettings(BaseModel):
    """Settings shared by all templates; unknown settings are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str = "Template"
    # Indentation of inserted lines; None means copying the one of the siblings.
    indentation: Optional[str] = None
    line_break: str = "\n"


class TemplateSlot:
    """
    A named, typed view on a sub-range of a fragment's text.

    A slot never edits its document: committing a value returns the edit
    to apply.
    """

    def __init__(
        self,
        key: TemplateSlotKey,
        raw_text: str,
        range: Range,
        document: Document,
        valuator_provider: ValuatorProvider,
    ):
        self.key = key
        self.raw_text = raw_text
        self.range = range
        self.document = document
        self.valuator: Valuator = valuator_provider(raw_text)

    @property
    def value(self) -> Any:
        return self.valuator.value

    def commit_value(self, value: Any) -> TextEdit:
        """Edit replacing the slot's text with the serialized value."""
        return TextEdit.replace(self.range, self.valuator.serialize(value))

    def __repr__(self) -> str:
        return f"<TemplateSlot {self.key}={self.raw_text!r} at {self.range}>"


class Template(ABC):
    """
    Base class of templates.

    Subclasses find the fragments of a document and derive their slots
    from a slot specification (slot key -> valuator provider). Slots are
    optional: a fragment only gets the slots whose key it actually contains.
    Each subclass also defines how a value is inserted for a missing slot
    and how an existing slot is deleted.
    """

    def __init__(self, slot_specification: SlotSpecification, **settings: Any):
        self.settings = TemplateSettings(**settings)
        self.slot_specification: Dict[TemplateSlotKey, ValuatorProvider] = dict(slot_specification)
        self._document: Optional[Document] = None
        self._fragments: Tuple[Fragment, ...] = ()
        self._fragments_to_keys_to_slots: Mapping[Fragment, Mapping[TemplateSlotKey, TemplateSlot]] = MappingProxyType({})

    @abstractmethod
    def _derive_slots(self, document: Document) -> List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]]:
        """Find the fragments of the document and the slots of each of them."""

    @abstractmethod
    def _insertion_edit(self, fragment: Fragment, key: TemplateSlotKey, text: str) -> TextEdit:
        """Edit adding a missing slot with the given text to a fragment."""

    @abstractmethod
    def _deletion_edit(self, fragment: Fragment, slot: TemplateSlot) -> TextEdit:
        """Edit removing an existing slot from a fragment."""

    @property
    def document(self) -> Optional[Document]:
        """Document of the last compute pass."""
        return self._document

    @property
    def fragments(self) -> List[Fragment]:
        return list(self._fragments)

    def compute(self, document: Document) -> List[Fragment]:
        """Recompute all fragments and slots for the given document."""
        derived = self._derive_slots(document)
        fragments = tuple(fragment for fragment, _ in derived)
        mapping = MappingProxyType({fragment: MappingProxyType(slots) for fragment, slots in derived})

        self._document, self._fragments, self._fragments_to_keys_to_slots = document, fragments, mapping

        slot_count = sum(len(slots) for _, slots in derived)
        logger.debug(f"{self.settings.name}: {len(fragments)} fragment(s), {slot_count} slot(s)")
        return list(fragments)

    def provide_fragments_for_document(self, document: Document) -> List[Fragment]:
        return self.compute(document)

    def bind(self, editor: DocumentEditor) -> None:
        """Compute now and again every time the editor applies edits."""
        editor.add_observer(self.compute)
        self.compute(editor.document)

    def slots_for(self, fragment: Fragment) -> Mapping[TemplateSlotKey, TemplateSlot]:
        """
        Slots of a fragment of the current pass.

        Raises:
            KeyError: if the fragment does not come from the current pass.
        """
        if fragment not in self._fragments_to_keys_to_slots:
            raise KeyError(f"{fragment!r} does not belong to the current pass of {self.settings.name}")
        return self._fragments_to_keys_to_slots[fragment]

    def get_slot(self, fragment: Fragment, key: TemplateSlotKey) -> Optional[TemplateSlot]:
        return self.slots_for(fragment).get(key)

    def values_for(self, fragment: Fragment) -> Dict[TemplateSlotKey, Any]:
        return {key: slot.value for key, slot in self.slots_for(fragment).items()}

    def commit(self, fragment: Fragment, key: TemplateSlotKey, value: Any) -> TextEdit:
        """
        Edit giving a new value to a slot of a fragment.

        Existing slots are replaced in place; missing ones are inserted
        according to the template's insertion policy.
        """
        if key not in self.slot_specification:
            raise KeyError(f"Unknown slot key {key!r}")

        slot = self.get_slot(fragment, key)
        if slot is not None:
            return slot.commit_value(value)

        text = self.slot_specification[key]("").serialize(value)
        return self._insertion_edit(fragment, key, text)

    def delete(self, fragment: Fragment, key: TemplateSlotKey) -> Optional[TextEdit]:
        """Edit removing a slot, or None if the fragment has no such slot."""
        slot = self.get_slot(fragment, key)
        if slot is None:
            return None
        return self._deletion_edit(fragment, slot)
