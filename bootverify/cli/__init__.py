"""bootverify CLI: Typer-based command-line interface.

Provides the ``bootverify`` command with subcommands for running a
verification pass and inspecting the results ledger.

All output uses Rich for formatted terminal display.
"""
