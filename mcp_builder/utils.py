"""Shared utility functions for the MCP Server Builder.

Provides project-name helpers and the Rich-based console output used across
the parser, scaffolder and CLI.  All user-facing messages go through the
single module-level ``console`` so tests and embedding applications can
capture or silence them in one place.
"""

from __future__ import annotations

import re

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

SERVER_SUFFIX = "-server"


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str) -> str:
    """Convert an arbitrary display name to a filesystem-safe project slug.

    * Lowercases the input.
    * Replaces every run of characters outside ``[a-z0-9]`` (including
      underscores and spaces) with a single hyphen.
    * Strips leading/trailing hyphens.

    Examples::

        sanitize_name("Weather Tools!") -> "weather-tools"
        sanitize_name("  MIXED_case  ") -> "mixed-case"
    """
    result = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return result.strip("-")


def ensure_server_suffix(name: str) -> str:
    """Append ``-server`` to *name* unless it already ends with it.

    Examples::

        ensure_server_suffix("weather-tools")  -> "weather-tools-server"
        ensure_server_suffix("weather-server") -> "weather-server"
    """
    if name.endswith(SERVER_SUFFIX):
        return name
    return f"{name}{SERVER_SUFFIX}"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a dimmed progress/diagnostic message."""
    console.print(f"[dim]{escape(message)}[/dim]")
