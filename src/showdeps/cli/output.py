"""Output formatting helpers for the showdeps CLI.

Text output is line-oriented and stable so it can be diffed and piped:

    plain      one package per line, sorted
    importers  package followed by its sorted importers
    chains     one dependency chain per line, root first

JSON and Rich table renderings carry the same information.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from showdeps.core.query import OutputMode, QueryResult


def text_lines(result: QueryResult) -> list[str]:
    """Render a query result as plain text lines."""
    if result.mode is OutputMode.CHAINS:
        return [" ".join(chain) for chain in result.chains]
    if result.mode is OutputMode.IMPORTERS:
        return [
            " ".join([package, *importers])
            for package, importers in sorted(result.packages.items())
        ]
    return sorted(result.packages)


def result_to_json(result: QueryResult) -> dict[str, Any]:
    """Convert a query result to a JSON-serializable dict."""
    out: dict[str, Any] = {"roots": list(result.roots), "mode": result.mode.value}
    if result.mode is OutputMode.CHAINS:
        out["chains"] = [list(chain) for chain in result.chains]
    else:
        out["packages"] = {
            package: list(importers)
            for package, importers in sorted(result.packages.items())
        }
    return out


def print_json(result: QueryResult, console: Console | None = None) -> None:
    """Print a query result as formatted JSON."""
    console = console or Console()
    console.print_json(json.dumps(result_to_json(result)))


def print_table(result: QueryResult, console: Console | None = None) -> None:
    """Print a query result as a Rich table.

    Args:
        result: The query result.
        console: Console to print to; a fresh stdout console by default.
    """
    console = console or Console()
    if result.mode is OutputMode.CHAINS:
        if not result.chains:
            console.print("[dim]No dependency chains found.[/dim]")
            return
        table = Table(title="Dependency Chains", show_header=True, header_style="bold")
        table.add_column("Root", style="bold")
        table.add_column("Chain")
        for chain in result.chains:
            table.add_row(chain[0], " -> ".join(chain[1:]))
        console.print(table)
        return

    if not result.packages:
        console.print("[dim]No dependencies found.[/dim]")
        return
    table = Table(title="Dependencies", show_header=True, header_style="bold")
    table.add_column("Package", style="bold")
    if result.mode is OutputMode.IMPORTERS:
        table.add_column("Imported by", style="dim")
    for package, importers in sorted(result.packages.items()):
        if result.mode is OutputMode.IMPORTERS:
            table.add_row(package, "\n".join(importers))
        else:
            table.add_row(package)
    console.print(table)
