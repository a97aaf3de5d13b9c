"""Rendering of grading outcomes and vocabularies with Rich."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from proctor._requirements import RequirementKind
from proctor._results import ParseError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from proctor._nodes import NodeKind
    from proctor._requirements import RequirementSet
    from proctor._results import GradeOutcome, ResultItem

_HEADINGS = {
    RequirementKind.MUST: "Required functionality",
    RequirementKind.MUST_NOT: "Must not use these elements",
    RequirementKind.STRUCTURE: "Required structure",
}


def _format_status(item: ResultItem) -> str:
    return "[green]✓ PASS[/green]" if item.passed else "[red]✗ FAIL[/red]"


def render_parse_error(error: ParseError, console: Console) -> None:
    """Render a parse error as a red panel."""
    location = ""
    if error.line is not None:
        location = f" [dim](line {error.line}"
        if error.column is not None:
            location += f", column {error.column}"
        location += ")[/dim]"
    console.print(
        Panel(
            f"{escape(error.message)}{location}\n\nNothing could be graded.",
            title="[bold]Invalid code[/bold]",
            border_style="red",
        ),
    )


def render_outcome(outcome: GradeOutcome, console: Console) -> None:
    """Render a grading outcome, one panel per non-empty requirement category."""
    if isinstance(outcome, ParseError):
        render_parse_error(outcome, console)
        return

    rendered = False
    for kind in RequirementKind:
        items = outcome.get(kind)
        if not items:
            continue
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Requirement", style="dim")
        table.add_column("Result")
        for item in items:
            table.add_row(escape(item.message), _format_status(item))
        passed = sum(1 for item in items if item.passed)
        console.print(
            Panel(
                table,
                title=f"[bold]{_HEADINGS[kind]}[/bold]",
                subtitle=f"[dim]{passed}/{len(items)} passed[/dim]",
                border_style="green" if passed == len(items) else "red",
            ),
        )
        rendered = True

    if not rendered:
        console.print("[dim]No requirements defined[/dim]")


def render_requirement_summary(
    requirement_set: RequirementSet,
    name: str,
    recursion_depth: int,
    console: Console,
) -> None:
    """Render the number of requirements per category, with what each category checks."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category", style="bold")
    table.add_column("Requirements", justify="right", style="yellow")
    table.add_column("Checks", style="dim")
    for kind in RequirementKind:
        table.add_row(kind.value, str(len(requirement_set.get(kind))), kind.description)

    console.print(
        Panel(
            table,
            title=f"[bold]Requirements: {escape(name)}[/bold]",
            subtitle=f"[dim]recursion depth {recursion_depth}[/dim]",
            border_style="cyan",
        ),
    )


def render_vocabulary(vocabulary: Mapping[str, NodeKind], console: Console) -> None:
    """Render the node-type vocabulary as a table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node type", style="bold")
    table.add_column("Category")
    table.add_column("Structural", justify="center")
    table.add_column("Statement fields", style="dim")

    for name, kind in vocabulary.items():
        table.add_row(
            escape(name),
            kind.category.value,
            "[green]✓[/green]" if kind.structural else "",
            ", ".join(kind.body_fields) or "-",
        )

    console.print(table)
