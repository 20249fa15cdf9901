"""``bootverify verify``: boot every pending image and run its checks.

Loads the catalog and the results ledger, verifies every artifact whose
ledger record is not yet verified, writes the ledger back, and exits
non-zero if any attempt failed.  Ctrl-C cancels in-flight attempts
cleanly: no new work starts and each running attempt deletes its VM.  A
second Ctrl-C falls back to default handling (KeyboardInterrupt); the
process still waits for running attempts to return before it exits.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from bootverify.catalog.registry import RegistryLoadError, load_registry
from bootverify.cluster.kubevirt import KubeVirtClient
from bootverify.cluster.protocol import ClusterError
from bootverify.config import VerifyConfig
from bootverify.core.orchestrator import VerifyOrchestrator
from bootverify.core.results_store import ResultsFileError, ResultsStore
from bootverify.core.verifier import ArtifactVerifier
from bootverify.core.worker_pool import WorkerPool
from bootverify.log import configure_logging
from bootverify.models.reports import VerifyReport

console = Console()
logger = logging.getLogger("bootverify")


@contextmanager
def cancel_on_interrupt(cancel: threading.Event) -> Iterator[threading.Event]:
    """Set *cancel* on the first SIGINT, restore default handling after."""
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    previous = signal.getsignal(signal.SIGINT)

    def _handler(signum: int, frame: Any) -> None:
        logger.warning("Interrupt received, cancelling in-flight verifications")
        cancel.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)


def render_report(report: VerifyReport) -> Table:
    table = Table(title="Verification Summary")
    table.add_column("Artifact", style="cyan")
    table.add_column("Outcome")
    table.add_column("Detail", style="dim")

    failed = {f.key: f for f in report.failures}
    for key in report.dispatched:
        if key in failed:
            f = failed[key]
            table.add_row(key, "[red]Failed[/red]", f"{f.error_type}: {f.message}")
        elif key in report.verified:
            table.add_row(key, "[green]Verified[/green]", "")
        else:
            table.add_row(key, "[yellow]No result[/yellow]", "cancelled or nothing to verify")
    return table


def verify_cmd(
    catalog: str = typer.Option(
        ...,
        "--catalog",
        "-c",
        envvar="BOOTVERIFY_CATALOG",
        help="Artifact catalog as 'package.module:attribute'.",
    ),
    results_file: Path = typer.Option(
        None, "--results-file", "-r", help="Path to the results ledger (JSON)."
    ),
    registry: str = typer.Option(
        None, "--registry", help="Registry prefix the image tags are pulled from."
    ),
    namespace: str = typer.Option(None, "--namespace", "-n", help="Namespace to run VMs in."),
    timeout: int = typer.Option(
        None, "--timeout", help="Maximum seconds to wait for a VM to be ready."
    ),
    workers: int = typer.Option(None, "--workers", "-w", help="Parallel verifications."),
    focus: str = typer.Option(None, "--focus", help="Only verify artifacts matching this glob."),
    server: str = typer.Option(None, "--server", help="Kubernetes API server URL."),
    token: str = typer.Option(None, "--token", help="Bearer token for the API server."),
    ca_file: Path = typer.Option(None, "--ca-file", help="CA bundle for the API server."),
    insecure: bool = typer.Option(
        None, "--insecure-skip-tls-verify", help="Do not verify the server certificate."
    ),
    log_level: str = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Verify that published images boot and pass their in-guest checks."""
    overrides = {
        "results_file": results_file,
        "registry": registry,
        "namespace": namespace,
        "timeout_seconds": timeout,
        "workers": workers,
        "focus": focus,
        "cluster_server": server,
        "cluster_token": token,
        "cluster_ca_file": ca_file,
        "insecure_skip_tls_verify": insecure,
        "log_level": log_level,
    }
    config = VerifyConfig().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    configure_logging(config.log_level)

    try:
        artifact_registry = load_registry(catalog)
    except RegistryLoadError as exc:
        console.print(f"[red]Catalog error:[/red] {exc}")
        raise typer.Exit(code=2)

    try:
        client = KubeVirtClient.from_config(config)
    except (ClusterError, OSError) as exc:
        console.print(f"[red]Cluster configuration error:[/red] {exc}")
        raise typer.Exit(code=2)

    verifier = ArtifactVerifier(
        client,
        namespace=config.namespace,
        registry=config.registry,
        timeout=config.timeout_seconds,
        poll_interval=config.poll_interval_seconds,
        username=config.verify_username,
        logger=logger,
    )
    orchestrator = VerifyOrchestrator(
        artifact_registry,
        ResultsStore(config.results_file),
        verifier,
        WorkerPool(config.workers, focus=config.focus),
        logger=logger,
    )

    try:
        with cancel_on_interrupt(threading.Event()) as cancel:
            report = orchestrator.run(cancel)
    except ResultsFileError as exc:
        console.print(f"[red]Results file error:[/red] {exc}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if report.dispatched:
        console.print(render_report(report))
    else:
        console.print("[dim]Nothing to verify.[/dim]")

    if not report.ok:
        console.print(
            f"[bold red]{len(report.failures)} verification(s) failed.[/bold red]"
        )
        raise typer.Exit(code=report.exit_code)
