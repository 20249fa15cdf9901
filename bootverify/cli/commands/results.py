"""``bootverify results``: show the results ledger."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from bootverify.config import VerifyConfig
from bootverify.core.results_store import ResultsFileError, ResultsStore

console = Console()


def results_cmd(
    results_file: Path = typer.Option(
        None, "--results-file", "-r", help="Path to the results ledger."
    ),
    pending_only: bool = typer.Option(
        False, "--pending", help="Only show artifacts not yet verified."
    ),
) -> None:
    """Print the ledger as a table."""
    if results_file is None:
        results_file = VerifyConfig().results_file
    try:
        results = ResultsStore(results_file).load()
    except ResultsFileError as exc:
        console.print(f"[red]Results file error:[/red] {exc}")
        raise typer.Exit(code=2)

    rows = [
        (key, results[key])
        for key in sorted(results)
        if not (pending_only and results[key].verified)
    ]
    if not rows:
        console.print("[dim]No results recorded.[/dim]")
        return

    table = Table(title=f"Results ({results_file})")
    table.add_column("Artifact", style="cyan")
    table.add_column("Tags")
    table.add_column("Verified", justify="center")
    for key, result in rows:
        verified = "[green]Yes[/green]" if result.verified else "[yellow]No[/yellow]"
        table.add_row(key, ", ".join(result.tags), verified)
    console.print(table)
