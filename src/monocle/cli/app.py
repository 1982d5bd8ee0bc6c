"""
Main CLI application for Monocle.

Provides a Typer-based command-line interface to inspect the syntax trees
of documents, find structural or textual patterns in them, and edit the
matched regions through template slots.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from ..config import MonocleConfig, get_config_manager, load_config
from ..core.documents import Document
from ..core.editor import DocumentEditor, TextEdit
from ..languages.language import LanguageRegistry, create_default_registry
from ..languages.syntax_tree import SyntaxTreeNode
from ..patterns.fragments import Fragment, TextualFragment
from ..patterns.regex_pattern import PatternSyntaxError, RegexPatternFinder
from ..patterns.tree_pattern import (
    CONTINUE_MATCH_DESCENDANTS,
    SKIP_MATCH_DESCENDANTS,
    SyntaxTreePattern,
    TreePatternFinder,
)
from ..templates.json_template import JsonObjectTemplate
from ..templates.regex_template import RegexPatternTemplate
from ..templates.template import SlotInsertionError, Template
from ..templates.valuators import JsonValuator, NumericValuator, TextualValuator, ValuatorProvider

# Initialize Typer app
app = typer.Typer(
    name="monocle",
    help="Find patterns in documents and edit them through typed slots",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()

VALUATOR_KINDS: Dict[str, ValuatorProvider] = {
    "text": TextualValuator,
    "number": NumericValuator,
    "json": JsonValuator,
}

_PREVIEW_LENGTH = 40


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (overrides the configuration)"),
) -> None:
    """
    Monocle: structural and textual pattern matching with templated edits.
    """
    config = load_config()
    level = (log_level or config.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        console.print(f"[yellow]Warning: unknown log level {escape(level)!r}, using WARNING[/yellow]")
        level = "WARNING"
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _preview(text: str) -> str:
    """Shortened, markup-safe rendering of a document excerpt."""
    text = text.replace("\n", "\\n")
    if len(text) > _PREVIEW_LENGTH:
        text = text[:_PREVIEW_LENGTH - 3] + "..."
    return escape(text)


def _load_document(
    file_path: Path,
    language_id: Optional[str],
    config: MonocleConfig,
    registry: Optional[LanguageRegistry] = None,
) -> Document:
    """Read a file into a Document, exiting with an error message on failure."""
    if not file_path.exists():
        console.print(f"[red]Error: File not found: {escape(str(file_path))}[/red]")
        raise typer.Exit(1)

    registry = registry or create_default_registry()
    language_id = language_id or config.language_id_for_path(file_path)
    language = registry.get_language_with_id(language_id)
    if language is None:
        console.print(f"[red]Error: Unknown language: {escape(language_id)}[/red]")
        console.print(f"Known languages: {', '.join(registry.ids)}")
        raise typer.Exit(1)

    return Document(file_path.read_text(encoding="utf-8"), language)


def _parse_slot_options(slot_options: List[str]) -> Dict[str, ValuatorProvider]:
    """Turn `key[:kind]` options into a slot specification."""
    slot_specification: Dict[str, ValuatorProvider] = {}
    for option in slot_options:
        key, _, kind = option.partition(":")
        kind = kind or "text"
        if kind not in VALUATOR_KINDS:
            console.print(f"[red]Error: Unknown slot kind {kind!r} (use one of {', '.join(VALUATOR_KINDS)})[/red]")
            raise typer.Exit(1)
        slot_specification[key] = VALUATOR_KINDS[kind]
    return slot_specification


def _build_tree(node: SyntaxTreeNode, branch: Tree, depth: int, max_depth: Optional[int]) -> None:
    for child in node.child_nodes:
        label = f"[cyan]{child.type}[/cyan] [dim]{child.range}[/dim]"
        if child.is_leaf:
            label += f" {_preview(repr(child.text))}"
        child_branch = branch.add(label)
        if max_depth is None or depth < max_depth:
            _build_tree(child, child_branch, depth + 1, max_depth)


def _fragment_table(fragments: List[Fragment], max_fragments: int) -> Table:
    table = Table(title=f"Fragments ({len(fragments)})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Range", style="blue")
    table.add_column("Text", style="white")
    table.add_column("Details", style="green")

    for index, fragment in enumerate(fragments[:max_fragments]):
        if isinstance(fragment, TextualFragment):
            details = escape(", ".join(f"{g.name}={g.value!r}" for g in fragment.groups))
        else:
            details = fragment.node.type
        table.add_row(str(index), str(fragment.range), _preview(fragment.text), details)
    return table


def _select_fragment(template: Template, document: Document, index: int) -> Fragment:
    fragments = template.compute(document)
    if not 0 <= index < len(fragments):
        console.print(f"[red]Error: No fragment #{index} ({len(fragments)} found)[/red]")
        raise typer.Exit(1)
    return fragments[index]


def _apply_edit(document: Document, edit: TextEdit, file_path: Path, dry_run: bool) -> None:
    editor = DocumentEditor(document)
    editor.add_edit(edit)

    if dry_run:
        diff_text = editor.preview_diff()
        console.print(Panel(
            Syntax(diff_text, "diff", theme="monokai"),
            title=f"Pending edit: {file_path.name}",
            border_style="blue"
        ))
        return

    new_document = editor.apply_edits()
    file_path.write_text(new_document.content, encoding="utf-8")
    console.print(f"[green]Updated {file_path} ({edit.kind.value} at {edit.range})[/green]")


@app.command()
def languages() -> None:
    """
    List the supported languages.
    """
    table = Table(title="Languages")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Editor id", style="yellow")
    table.add_column("Structural matching", style="green")

    for language in create_default_registry():
        table.add_row(
            language.id,
            language.name,
            language.code_editor_language_id,
            "yes" if language.supports_structural_matching else "no",
        )

    console.print(table)


@app.command()
def tree(
    file_path: Path = typer.Argument(..., help="Document to parse"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id"),
    max_depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum depth to show"),
) -> None:
    """
    Show the syntax tree of a document.
    """
    document = _load_document(file_path, language, load_config())
    syntax_tree = document.syntax_tree
    if syntax_tree is None:
        console.print(f"[yellow]Language {document.language.id} has no parser[/yellow]")
        return

    root = syntax_tree.root
    rich_tree = Tree(f"[bold cyan]{root.type}[/bold cyan] [dim]{root.range}[/dim]")
    _build_tree(root, rich_tree, 1, max_depth)
    console.print(rich_tree)

    if syntax_tree.is_error:
        console.print(f"[red]Parse error: {escape(root.message)}[/red]")


@app.command()
def find(
    file_path: Path = typer.Argument(..., help="Document to search"),
    regex: Optional[str] = typer.Option(None, "--regex", "-r", help="Regular expression (named groups allowed)"),
    node_type: Optional[str] = typer.Option(None, "--node-type", "-t", help="Syntax tree node type to match"),
    skip_descendants: bool = typer.Option(False, "--skip-descendants", help="Do not look for matches inside matched nodes"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id"),
) -> None:
    """
    Find the fragments matching a regular expression or a node type.
    """
    if (regex is None) == (node_type is None):
        console.print("[red]Error: Use exactly one of --regex and --node-type[/red]")
        raise typer.Exit(1)

    config = load_config()
    document = _load_document(file_path, language, config)

    if regex is not None:
        try:
            fragments: List[Fragment] = list(RegexPatternFinder(regex).apply_in_document(document))
        except PatternSyntaxError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        if not document.language.supports_structural_matching:
            console.print(f"[red]Error: Language {document.language.id} does not support structural matching[/red]")
            raise typer.Exit(1)
        descent = SKIP_MATCH_DESCENDANTS if skip_descendants else CONTINUE_MATCH_DESCENDANTS
        finder = TreePatternFinder(SyntaxTreePattern.for_node_type(node_type, descent))
        fragments = list(finder.apply_in_document(document))

    if not fragments:
        console.print("[yellow]No fragments found[/yellow]")
        return
    console.print(_fragment_table(fragments, config.max_fragments))


@app.command()
def slots(
    file_path: Path = typer.Argument(..., help="Document to search"),
    regex: str = typer.Option(..., "--regex", "-r", help="Regular expression with named groups"),
    slot: List[str] = typer.Option(..., "--slot", "-s", help="Slot as key[:text|number|json]"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id"),
) -> None:
    """
    Show the template slots of every regex match.
    """
    config = load_config()
    document = _load_document(file_path, language, config)
    try:
        template = RegexPatternTemplate(regex, _parse_slot_options(slot))
    except PatternSyntaxError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    fragments = template.compute(document)
    if not fragments:
        console.print("[yellow]No fragments found[/yellow]")
        return

    table = Table(title="Slots")
    table.add_column("Fragment", style="cyan", justify="right")
    table.add_column("Key", style="yellow")
    table.add_column("Range", style="blue")
    table.add_column("Value", style="green")

    for index, fragment in enumerate(fragments[:config.max_fragments]):
        fragment_slots = template.slots_for(fragment)
        for key in template.slot_specification:
            if key in fragment_slots:
                found = fragment_slots[key]
                try:
                    shown = escape(repr(found.value))
                except ValueError as e:
                    shown = f"[red]{escape(repr(found.raw_text))} ({escape(str(e))})[/red]"
                table.add_row(str(index), key, str(found.range), shown)
            else:
                table.add_row(str(index), key, "-", "[dim]absent[/dim]")

    console.print(table)


@app.command("set")
def set_slot(
    file_path: Path = typer.Argument(..., help="Document to edit"),
    regex: str = typer.Option(..., "--regex", "-r", help="Regular expression with named groups"),
    slot: List[str] = typer.Option(..., "--slot", "-s", help="Slot as key[:text|number|json]"),
    key: str = typer.Option(..., "--key", "-k", help="Slot to change"),
    value: str = typer.Option(..., "--value", "-v", help="New value, written as the slot's kind reads it"),
    fragment_index: int = typer.Option(0, "--fragment", "-f", help="Index of the fragment to edit"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the diff instead of writing the file"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language id"),
) -> None:
    """
    Change the value of a regex template slot.
    """
    document = _load_document(file_path, language, load_config())
    slot_specification = _parse_slot_options(slot)
    if key not in slot_specification:
        console.print(f"[red]Error: --key {key} is not one of the declared slots[/red]")
        raise typer.Exit(1)

    try:
        template = RegexPatternTemplate(regex, slot_specification)
        fragment = _select_fragment(template, document, fragment_index)
        typed_value = slot_specification[key](value).value
        edit = template.commit(fragment, key, typed_value)
    except (PatternSyntaxError, SlotInsertionError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _apply_edit(document, edit, file_path, dry_run)


@app.command("json-set")
def json_set(
    file_path: Path = typer.Argument(..., help="JSON document to edit"),
    object_key: str = typer.Option(..., "--object-key", "-o", help="Key of the properties holding the objects to edit"),
    key: str = typer.Option(..., "--key", "-k", help="Property of the object to set"),
    value: str = typer.Option(..., "--value", "-v", help="New value as a JSON literal"),
    fragment_index: int = typer.Option(0, "--fragment", "-f", help="Index of the object to edit"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the diff instead of writing the file"),
) -> None:
    """
    Set (or add) a property in JSON objects assigned to a given key.
    """
    config = load_config()
    document = _load_document(file_path, "json", config)
    if document.syntax_tree.is_error:
        console.print("[red]Error: The document is not valid JSON[/red]")
        raise typer.Exit(1)

    template = JsonObjectTemplate.create_for_assignment_to_key_named(
        object_key,
        {key: JsonValuator},
        indentation=config.indentation,
    )
    fragment = _select_fragment(template, document, fragment_index)
    try:
        edit = template.commit(fragment, key, JsonValuator(value).value)
    except ValueError as e:
        console.print(f"[red]Error: Invalid JSON value {escape(repr(value))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _apply_edit(document, edit, file_path, dry_run)


@app.command()
def config() -> None:
    """
    Show the current configuration.
    """
    info = get_config_manager().get_config_info()

    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for setting, setting_value in info.items():
        table.add_row(setting, str(setting_value))

    console.print(table)


if __name__ == "__main__":
    app()
