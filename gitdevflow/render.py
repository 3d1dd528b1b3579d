"""
Rendering functions for gitdevflow output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box

from .services.version_service import Resolution

console = Console()


def render_resolution_table(resolution: Resolution) -> None:
    """Render how a version was resolved as a two-column table."""
    table = Table(
        title=f"Version: {resolution.version}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    data = resolution.to_dict()
    rows = [
        ("Path", data['path']),
        ("Branch", data['branch']),
        ("Kind", data['kind']),
        ("Base tag", data['base_tag']),
        ("Base version", data['base_version']),
        ("Bump", data['bump']),
        ("Commit types", ", ".join(data['commit_types'])),
        ("Commits since tag", str(len(data['commits']))),
    ]
    if resolution.dropped_parents:
        rows.append(("Skipped parents", ", ".join(d['commit'][:7] for d in data['dropped_parents'])))
    if resolution.error:
        rows.append(("Error", f"[red]{resolution.error}[/red]"))

    for name, value in rows:
        table.add_row(name, value if value else "[dim]-[/dim]")

    console.print(table)
