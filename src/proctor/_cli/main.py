import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from proctor._evaluator import Proctor
from proctor._io import (
    RequirementDocument,
    RequirementFileError,
    export_results_to_toml,
    load_requirements_from_toml,
    results_to_json,
)
from proctor._matcher import DEFAULT_RECURSION_DEPTH
from proctor._nodes import DEFAULT_VOCABULARY, non_structural_types, unknown_types
from proctor._parser import SourceType
from proctor._requirements import RequirementSet
from proctor._results import ParseError

from .config import ConfigError, ProctorConfig, get_config
from .render import render_outcome, render_requirement_summary, render_vocabulary

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

EXIT_FAILED = 1
EXIT_ERROR = 2


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Proctor CLI: grade JavaScript code against structural requirements."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
        force=True,
    )


def _load_config() -> ProctorConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from e


def _load_document(path: Path) -> RequirementDocument:
    try:
        return load_requirements_from_toml(path)
    except RequirementFileError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from e


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]✗ Cannot read source file {escape(source)}: {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_ERROR) from e


def _warn_about_requirements(requirement_set: RequirementSet) -> None:
    unknown = unknown_types(requirement_set.node_types(), DEFAULT_VOCABULARY)
    if unknown:
        err_console.print(
            f"[yellow]⚠ Unknown node type(s), these requirements can never match:[/yellow] {', '.join(unknown)}",
        )
    flat = non_structural_types(requirement_set.parent_types(), DEFAULT_VOCABULARY)
    if flat:
        err_console.print(
            f"[yellow]⚠ Structure parent type(s) that never contain statements:[/yellow] {', '.join(flat)}",
        )


@app.command()
def grade(
    source: Annotated[
        str,
        typer.Argument(help="Path to a JavaScript file, or '-' to read from stdin"),
    ],
    *,
    requirements: Annotated[
        Path | None,
        typer.Option("-r", "--requirements", help="Path to the requirements TOML file"),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option("--depth", min=1, help=f"Recursion depth (default: {DEFAULT_RECURSION_DEPTH})"),
    ] = None,
    module: Annotated[
        bool,
        typer.Option("--module", help="Parse the source as an ES module"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print results as JSON to stdout"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Also write results to a TOML file"),
    ] = None,
) -> None:
    """Grade JavaScript code against a requirements file.

    Exits with 0 when every requirement passes, 1 when one fails and 2 when
    the code cannot be parsed or the inputs are invalid.
    """
    config = _load_config()

    requirements_path = requirements or config.requirements
    if requirements_path is None:
        err_console.print(
            "[red]✗ No requirements file given. Use --requirements or set \\[tool.proctor].requirements[/red]",
        )
        raise typer.Exit(code=EXIT_ERROR)

    if not json_output:
        err_console.print(f"[cyan]Loading requirements from:[/cyan] {requirements_path}")
    document = _load_document(requirements_path)
    requirement_set = document.to_requirement_set()
    _warn_about_requirements(requirement_set)

    recursion_depth = depth or document.recursion_depth or config.recursion_depth or DEFAULT_RECURSION_DEPTH
    if module:
        source_type = SourceType.MODULE
    else:
        source_type = document.source_type or config.source_type or SourceType.SCRIPT

    code = _read_source(source)
    logger.debug("Grading %s with depth %d as %s", source, recursion_depth, source_type)

    proctor = Proctor(requirement_set, recursion_depth=recursion_depth, source_type=source_type)
    outcome = proctor.grade(code)

    if json_output:
        typer.echo(results_to_json(outcome))
    else:
        err_console.print()
        render_outcome(outcome, out_console)

    if output is not None:
        export_results_to_toml(outcome, output)
        if not json_output:
            err_console.print(f"[cyan]Results written to:[/cyan] {output}")

    if isinstance(outcome, ParseError):
        raise typer.Exit(code=EXIT_ERROR)
    if not outcome.passed:
        if not json_output:
            err_console.print("[red]✗ Some requirements failed[/red]")
        raise typer.Exit(code=EXIT_FAILED)
    if not json_output:
        err_console.print("[green]✓ All requirements passed[/green]")


@app.command()
def check(
    requirements: Annotated[
        Path | None,
        typer.Argument(help="Path to the requirements TOML file (default: the requirements key of tool.proctor in pyproject.toml)"),
    ] = None,
) -> None:
    """Validate a requirements file without grading any code."""
    config = _load_config()
    requirements_path = requirements or config.requirements
    if requirements_path is None:
        err_console.print("[red]✗ No requirements file given[/red]")
        raise typer.Exit(code=EXIT_ERROR)

    document = _load_document(requirements_path)
    requirement_set = document.to_requirement_set()

    depth = document.recursion_depth or config.recursion_depth or DEFAULT_RECURSION_DEPTH
    render_requirement_summary(requirement_set, requirements_path.name, depth, err_console)
    _warn_about_requirements(requirement_set)
    err_console.print("[green]✓ Requirements are valid[/green]")


@app.command()
def vocabulary() -> None:
    """List the node types requirements can refer to."""
    render_vocabulary(DEFAULT_VOCABULARY, out_console)


if __name__ == "__main__":
    app()
