"""
Example usage of Monocle.

This demonstrates how to use Monocle programmatically to find patterns
in documents and edit them through template slots.
"""

from monocle import Document, DocumentEditor, create_default_registry
from monocle.patterns import RegexPatternFinder, SyntaxTreePattern, TreePatternFinder
from monocle.templates import (
    CssRuleTemplate,
    JsonObjectTemplate,
    JsonValuator,
    NumericValuator,
    RegexPatternTemplate,
    TextualValuator,
)


def example_json_editing():
    """Example of editing a JSON object through a template."""
    registry = create_default_registry()
    document = Document(
        '{\n  "mark": {\n    "fill": "red",\n    "size": 10\n  }\n}\n',
        registry.get_language_with_id("json"),
    )

    print("\n=== Example 2: JSON object template ===")
    template = JsonObjectTemplate.create_for_assignment_to_key_named(
        "mark",
        {"fill": JsonValuator, "size": NumericValuator, "opacity": NumericValuator},
    )

    editor = DocumentEditor(document)
    template.bind(editor)
    fragment = template.fragments[0]
    print(f"Slots before: {template.values_for(fragment)}")

    # Both edits refer to the same pass and are applied as one batch
    editor.add_edit(template.commit(fragment, "fill", "blue"))
    editor.add_edit(template.commit(fragment, "opacity", 0.5))
    print(editor.preview_diff())
    editor.apply_edits()

    # bind() recomputed the template after the batch
    print(f"Slots after: {template.values_for(template.fragments[0])}")
    print(editor.document.content)


def example_css_editing():
    """Example of inserting a declaration into a CSS rule."""
    registry = create_default_registry()
    document = Document("button {\n    color: red\n}\n", registry.get_language_with_id("css"))

    print("\n=== Example 3: CSS rule template ===")
    template = CssRuleTemplate.create_for_selector("button", {"padding": TextualValuator})
    fragment = template.compute(document)[0]

    editor = DocumentEditor(document)
    editor.add_edit(template.commit(fragment, "padding", "4px"))
    print(editor.apply_edits().content)


def example_finding():
    """Example of structural and textual pattern finding."""
    registry = create_default_registry()

    print("=== Example 1: Finding fragments ===")
    expression = Document("2 * x^2 - sqrt(y^3 + 1)", registry.get_language_with_id("math"))
    finder = TreePatternFinder(SyntaxTreePattern.for_node_type("Exponent"))
    for fragment in finder.apply_in_document(expression):
        print(f"• {fragment.node.type} at {fragment.range}: {fragment.text}")

    css = Document("a { width: 10px; height: 20px; }", registry.get_language_with_id("css"))
    for fragment in RegexPatternFinder(r"(?<num>\d+)px").apply_in_document(css):
        print(f"• num={fragment.group('num').value} at {fragment.group('num').range}")

    template = RegexPatternTemplate(r"(?<num>\d+)px", {"num": NumericValuator})
    fragments = template.compute(css)
    print(f"Sizes: {[template.values_for(f)['num'] for f in fragments]}")


if __name__ == "__main__":
    print("Monocle Example")
    print("===============")

    example_finding()
    example_json_editing()
    example_css_editing()

    print("\nTo use the command line:")
    print("  monocle find theme.json --node-type Property")
    print("  monocle json-set theme.json --object-key mark --key fill --value '\"blue\"' --dry-run")
