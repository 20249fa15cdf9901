"""Main Typer application: imports and registers all CLI commands.

Entry point: ``bootverify`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from bootverify.cli.commands.results import results_cmd
from bootverify.cli.commands.verify import verify_cmd

app = typer.Typer(
    name="bootverify",
    help="bootverify: boot published VM disk images and verify them in-guest.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="verify", help="Verify that images boot and guests work.")(verify_cmd)
app.command(name="results", help="Show the results ledger.")(results_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
