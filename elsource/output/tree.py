"""Tree output for source location chains."""

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.tree import Tree

from ..models import SourceLocation


def _label(location: SourceLocation, depth: int) -> str:
    # Format: [depth] <tag> Component (file:line:column)
    label = f"[dim][{depth}][/dim]"
    if location.tag_name:
        label += f" [cyan]<{escape(location.tag_name.lower())}>[/cyan]"
    if location.component_name:
        label += f" [bold]{escape(location.component_name)}[/bold]"
    label += f" [dim]({escape(location.location_str)})[/dim]"
    return label


def print_location_tree(location: SourceLocation, console: Console):
    """Print a location and its ancestors as a tree.

    Args:
        location: Primary location with ancestors linked through ``parent``.
        console: Rich console for output.
    """
    root = Tree(_label(location, 0))
    if location.source_code:
        root.add(Syntax(location.source_code, "tsx", line_numbers=False))

    branch = root
    for depth, ancestor in enumerate(location.chain(), 1):
        branch = branch.add(_label(ancestor, depth))
    console.print(root)
