"""
Templates over JSON objects, where slots are the values of properties.

Also provides the property helpers used to read, insert and delete
properties of a parsed JSON object.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar, Union

from ..core.documents import Document, Range
from ..core.editor import DocumentEditor, TextEdit
from ..languages.json_parser import ObjectNode, PropertyNode
from ..languages.syntax_tree import SyntaxTreeNode
from ..patterns.fragments import Fragment, SyntacticFragment
from ..patterns.tree_pattern import SKIP_MATCH_DESCENDANTS, SyntaxTreePattern, TreePatternFinder
from .template import SlotSpecification, Template, TemplateSlot, TemplateSlotKey


R = TypeVar("R")

_LEADING_WHITESPACE = re.compile(r"[ \t]*")
_DEFAULT_INDENTATION = "    "


def find_properties(obj: ObjectNode, keys: Union[str, Sequence[str]]) -> List[PropertyNode]:
    """Properties of the object whose key is one of the given keys, in source order."""
    if isinstance(keys, str):
        keys = [keys]
    return [prop for prop in obj.properties if prop.key.value in keys]


def process_property(
    obj: ObjectNode,
    keys: Union[str, Sequence[str]],
    on_found: Callable[[PropertyNode], R],
    on_missing: Optional[Callable[[], R]] = None,
) -> Optional[R]:
    """
    Call on_found with the property of the first key (in the given order)
    that the object defines, or on_missing if it defines none of them.
    """
    if isinstance(keys, str):
        keys = [keys]
    for key in keys:
        prop = obj.get_property(key)
        if prop is not None:
            return on_found(prop)
    if on_missing is not None:
        return on_missing()
    return None


def _line_indentation(text: str, offset: int) -> str:
    line_start = text.rfind("\n", 0, offset) + 1
    return _LEADING_WHITESPACE.match(text, line_start).group()


def property_insertion_edit(
    document: Document,
    obj: ObjectNode,
    key: str,
    value_text: str,
    indentation: Optional[str] = None,
    line_break: str = "\n",
) -> TextEdit:
    """
    Edit adding a `"key": value` property to an object.

    The property goes after the last existing one, or right after `{` if
    the object is empty. In multi-line objects it gets its own line,
    indented like the last property unless an indentation is given.
    """
    text = document.content
    member = f"{json.dumps(key, ensure_ascii=False)}: {value_text}"
    is_multiline = "\n" in text[obj.start_offset:obj.end_offset]

    if obj.properties:
        last = obj.properties[-1]
        offset = last.end_offset
        if is_multiline:
            indent = indentation if indentation is not None else _line_indentation(text, last.start_offset)
            new_text = f",{line_break}{indent}{member}"
        else:
            new_text = f", {member}"
    else:
        offset = obj.start_offset + 1
        if is_multiline:
            closing_indent = _line_indentation(text, obj.end_offset - 1)
            indent = indentation if indentation is not None else closing_indent + _DEFAULT_INDENTATION
            new_text = f"{line_break}{indent}{member}"
        else:
            new_text = member

    return TextEdit.insert(document.offset_to_position(offset), new_text)


def property_deletion_edit(document: Document, obj: ObjectNode, prop: PropertyNode) -> TextEdit:
    """
    Edit removing a property together with one adjacent comma.

    The comma before the property is removed when there is one; otherwise
    the comma after it. Removing the only property empties the object.
    """
    properties = obj.properties
    index = properties.index(prop)
    if index > 0:
        start, end = properties[index - 1].end_offset, prop.end_offset
    elif len(properties) > 1:
        start, end = prop.start_offset, properties[1].start_offset
    else:
        start, end = obj.start_offset + 1, obj.end_offset - 1

    convert = document.offset_to_position
    return TextEdit.delete(Range(convert(start), convert(end)))


def insert_property(editor: DocumentEditor, obj: ObjectNode, key: str, value_text: str) -> None:
    editor.add_edit(property_insertion_edit(editor.document, obj, key, value_text))


def delete_property(editor: DocumentEditor, obj: ObjectNode, key: str) -> None:
    """Queue the deletion of the property with the given key, if there is one."""
    prop = obj.get_property(key)
    if prop is not None:
        editor.add_edit(property_deletion_edit(editor.document, obj, prop))


def _is_object_assignment_to(key: str) -> Callable[[SyntaxTreeNode], bool]:
    def predicate(node: SyntaxTreeNode) -> bool:
        return (
            isinstance(node, PropertyNode)
            and node.key.value == key
            and isinstance(node.value, ObjectNode)
        )
    return predicate


class JsonObjectTemplate(Template):
    """
    Template whose fragments hold a JSON object and whose slots are the
    values of that object's properties.

    Fragments may be matched on the object itself or on a property whose
    value is the object. A slot is bound to the value node of the property
    named like the slot key (the last one if the key is duplicated).
    """

    def __init__(self, fragment_provider: TreePatternFinder, slot_specification: SlotSpecification, **settings: Any):
        super().__init__(slot_specification, **settings)
        self.fragment_provider = fragment_provider

    @classmethod
    def create_for_assignment_to_key_named(
        cls,
        key: str,
        slot_specification: SlotSpecification,
        **settings: Any,
    ) -> JsonObjectTemplate:
        """Template over every object assigned to a property with the given key."""
        settings.setdefault("name", f"JSON object {key!r}")
        pattern = SyntaxTreePattern(_is_object_assignment_to(key), SKIP_MATCH_DESCENDANTS)
        return cls(TreePatternFinder(pattern), slot_specification, **settings)

    @staticmethod
    def object_of(fragment: Fragment) -> ObjectNode:
        node = fragment.node if isinstance(fragment, SyntacticFragment) else None
        if isinstance(node, PropertyNode):
            node = node.value
        if not isinstance(node, ObjectNode):
            raise TypeError(f"{fragment!r} does not hold a JSON object")
        return node

    def _derive_slots(self, document: Document) -> List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]]:
        derived: List[Tuple[Fragment, Dict[TemplateSlotKey, TemplateSlot]]] = []
        for fragment in self.fragment_provider.provide_fragments_for_document(document):
            obj = self.object_of(fragment)
            keys_to_slots: Dict[TemplateSlotKey, TemplateSlot] = {}
            for slot_key, valuator_provider in self.slot_specification.items():
                prop = obj.get_property(slot_key)
                if prop is not None:
                    keys_to_slots[slot_key] = TemplateSlot(
                        slot_key,
                        prop.value.text,
                        prop.value.range,
                        document,
                        valuator_provider,
                    )
            derived.append((fragment, keys_to_slots))
        return derived

    def _insertion_edit(self, fragment: Fragment, key: TemplateSlotKey, text: str) -> TextEdit:
        return property_insertion_edit(
            fragment.document,
            self.object_of(fragment),
            key,
            text,
            indentation=self.settings.indentation,
            line_break=self.settings.line_break,
        )

    def _deletion_edit(self, fragment: Fragment, slot: TemplateSlot) -> TextEdit:
        obj = self.object_of(fragment)
        return property_deletion_edit(fragment.document, obj, obj.get_property(slot.key))
