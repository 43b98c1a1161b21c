"""Rosetta CLI - declared-type signature tool.

This module provides the command-line interface for Rosetta,
enabling signature parsing, name classification and Java source scanning.
"""

from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from rosetta.core.errors import RosettaError

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="rosetta",
    help="Parse, classify and capture declared Java type signatures",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode and route library logging to stderr."""
    global _verbose
    _verbose = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")


def fail(e: RosettaError) -> NoReturn:
    """Report a library error and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(e))}")
    print_exception(e)
    raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """Rosetta CLI - declared-type signature tool."""
    set_verbose(verbose)


@app.command()
def parse(
    signature: Annotated[str, typer.Argument(help="Type signature, e.g. 'List<? super T>'")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """Parse a type signature and show its canonical and structured forms.

    Example:
        rosetta parse "java.util.Map<K, java.util.List<V>>"
    """
    from rosetta.core.parser import parse as parse_signature
    from rosetta.core.serializer import to_compact, to_structured

    try:
        reference = parse_signature(signature)
    except RosettaError as e:
        fail(e)

    structured = to_structured(reference)
    if json_output:
        payload = {"canonical": to_compact(reference), "structured": structured}
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    console.print(f"[blue]Canonical:[/blue] {escape(to_compact(reference))}")
    console.print("[blue]Structured:[/blue]")
    console.print_json(data=structured)


@app.command()
def classify(
    names: Annotated[list[str], typer.Argument(help="Bare type names to classify")],
) -> None:
    """Classify bare names as primitive, concrete type or type variable.

    Example:
        rosetta classify int T java.lang.String
    """
    from rosetta.cli._tables import build_classification_table

    console.print(build_classification_table(names))


@app.command()
def scan(
    source_path: Annotated[
        Path,
        typer.Argument(
            help="Java source directory or file",
            exists=True,
            resolve_path=True,
        ),
    ],
    class_name: Annotated[
        Optional[str],
        typer.Option("--class", "-c", help="Only include this class (qualified or local name)"),
    ] = None,
    erase: Annotated[
        bool,
        typer.Option("--erase", help="Erase type variables to their bounds"),
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the JSON document to this file"),
    ] = None,
) -> None:
    """Capture the declared API signatures of Java sources.

    Prints the JSON document, or writes it to --output and prints a summary.

    Example:
        rosetta scan src/main/java --class com.example.Cache -o api.json
    """
    from rosetta.adapters.java import JavaAdapter
    from rosetta.cli._tables import build_signatures_table
    from rosetta.core.serializer import serialize
    from rosetta.reflect.document import build_document

    adapter = JavaAdapter()
    try:
        signatures = adapter.analyze(source_path, erase=erase)
    except RosettaError as e:
        fail(e)

    if class_name is not None:
        signatures = [s for s in signatures if class_name in (s.name, s.local_name)]
        if not signatures:
            err_console.print(f"[red]Error:[/red] Class not found: {escape(class_name)}")
            raise typer.Exit(1)

    try:
        document = serialize(build_document(signatures))
    except RosettaError as e:
        fail(e)

    if output is None:
        typer.echo(document)
        return

    output.write_text(document + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] Exported to: {output}")
    console.print(build_signatures_table(signatures))


if __name__ == "__main__":
    app()
