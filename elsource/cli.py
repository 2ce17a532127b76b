"""Main CLI application."""

import asyncio
import logging
from pathlib import Path

import msgspec
import typer
from rich.console import Console

from .locate import locate_element_source, resolve_server_location
from .models import LocateOptions, SourceLocation
from .output import location_to_dict, print_json, print_location_tree, result_to_dict
from .resolvers.stack_parser import split_location
from .snapshot import Snapshot, load_snapshot

app = typer.Typer(
    name="elsource",
    help="Map rendered elements back to their component source",
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def get_snapshot(path: Path) -> Snapshot:
    """Load a snapshot or exit with an error."""
    if not path.exists():
        console.print(f"[red]Error: Snapshot file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return load_snapshot(path)
    except msgspec.DecodeError as e:
        console.print(f"[red]Error: Invalid snapshot {path}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def locate(
    snapshot: Path = typer.Argument(..., help="Path to snapshot JSON"),
    element: str = typer.Option(..., "--element", "-e", help="Element id in the snapshot"),
    depth: int = typer.Option(10, "--depth", "-d", help="Max tree ascent and ancestor chain depth"),
    source: bool = typer.Option(False, "--source", help="Include source snippets"),
    no_server: bool = typer.Option(False, "--no-server", help="Skip on-disk server source map resolution"),
    no_ancestors: bool = typer.Option(False, "--no-ancestors", help="Skip the ancestor chain"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details"),
):
    """Locate the component source of a snapshot element."""
    _configure_logging(verbose)
    snap = get_snapshot(snapshot)

    target = snap.element(element)
    if target is None:
        if json_output:
            print_json({"error": "Element not found", "element": element})
        else:
            console.print(f"[red]Element not found: {element}[/red]")
        raise typer.Exit(1)

    options = LocateOptions(
        max_depth=depth,
        include_source=source,
        resolve_server=not no_server,
        include_ancestors=not no_ancestors,
    )
    result = asyncio.run(locate_element_source(target, options))

    if json_output:
        print_json(result_to_dict(result))
    elif result.success:
        print_location_tree(result.data, console)
    else:
        console.print(f"[red]{result.error}[/red]")

    if not result.success:
        raise typer.Exit(1)


@app.command("resolve-server")
def resolve_server(
    location: str = typer.Argument(..., help="Server location as URL:LINE:COLUMN"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details"),
):
    """Resolve an about://<origin>/Server/ location through its on-disk source map."""
    _configure_logging(verbose)
    file, line, column = split_location(location)
    if not file or line is None:
        console.print(f"[red]Error: Expected URL:LINE:COLUMN, got {location}[/red]")
        raise typer.Exit(1)

    source_location = SourceLocation(file=file, line=line, column=column or 0)
    resolved = asyncio.run(resolve_server_location(source_location))

    if json_output:
        print_json(location_to_dict(resolved))
    else:
        console.print(resolved.location_str)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
