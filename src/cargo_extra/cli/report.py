"""Rich rendering of packages and composed arguments.

All display-related logic lives here — no business logic, no process
spawning, no metadata parsing.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from typing import Any

from cargo_extra.cli.console import console
from cargo_extra.core.models import Package
from cargo_extra.exceptions import EnvironmentError


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for package rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def format_tokens(tokens: Sequence[str]) -> str:
    """Shell-quoted rendering of *tokens*, or ``"(none)"`` when empty."""
    if not tokens:
        return "(none)"
    return shlex.join(tokens)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_args(args: Sequence[str], slop: Sequence[str], command: str) -> None:
    """Show the serialized flags, passthrough tokens, and full command."""
    console.print(f"[bold cyan]Arguments:[/bold cyan]   {format_tokens(args)}")
    console.print(f"[bold cyan]Passthrough:[/bold cyan] {format_tokens(slop)}")
    console.print(f"[bold cyan]Command:[/bold cyan]     {command}")


def render_packages(title: str, packages: Sequence[Package]) -> None:
    """Print a Rich table of *packages*."""
    table_class = _import_rich_table()

    table = table_class(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Package", justify="left", min_width=12)
    table.add_column("Version", justify="left", min_width=8)
    table.add_column("Manifest", justify="left")

    for i, package in enumerate(packages, start=1):
        table.add_row(
            str(i),
            package.name,
            package.version,
            package.manifest_path,
        )

    console.print()
    console.print(table)
    console.print()
