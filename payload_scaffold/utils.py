"""Shared utility functions for Payload Scaffold.

Provides Rich-based console reporting, spec-file loading (JSON or YAML),
and duration formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import yaml
from rich.console import Console
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Spec-file I/O
# ---------------------------------------------------------------------------


def load_spec_file(path: str | Path) -> Any:
    """Load a project specification from a JSON or YAML file.

    Files ending in ``.yaml`` / ``.yml`` are parsed with PyYAML; anything
    else is parsed as JSON.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If a JSON file is malformed.
        yaml.YAMLError: If a YAML file is malformed.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(raw)
    return json.loads(raw)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.42)  -> "0.4s"
        format_duration(65.2)  -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_scaffold_errors(errors: Iterable[Any], title: str = "Validation errors") -> None:
    """Print scaffold errors as a table with code, location, message and fix.

    Accepts :class:`~payload_scaffold.scaffolder.models.ScaffoldError`
    instances or plain dicts with the same keys.
    """
    table = Table(title=title, show_header=True, header_style="bold red")
    table.add_column("Code", style="bold", no_wrap=True)
    table.add_column("Location", style="cyan")
    table.add_column("Message")
    table.add_column("Suggestion", style="dim")

    for error in errors:
        data = error if isinstance(error, dict) else error.model_dump()
        table.add_row(
            data.get("code", ""),
            data.get("field") or "",
            data.get("message", ""),
            data.get("suggestion") or "",
        )

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
