"""Logging helpers.

The CLI calls :func:`configure_logging` once.  Library code only ever uses
``logging.getLogger(__name__)`` or a logger handed to it by the caller, and
attaches per-artifact context through :class:`ArtifactLogAdapter`.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    """Install a RichHandler on the root logger at *level*."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


class ArtifactLogAdapter(logging.LoggerAdapter):
    """Prefix every record with the artifact identity.

    The identity is also exposed as ``record.artifact`` for handlers that
    want structured output.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        artifact = self.extra.get("artifact", "") if self.extra else ""
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("artifact", artifact)
        kwargs["extra"] = extra
        return f"[{artifact}] {msg}", kwargs


def artifact_logger(logger: logging.Logger, artifact_key: str) -> ArtifactLogAdapter:
    """Return an adapter on *logger* scoped to one artifact."""
    return ArtifactLogAdapter(logger, {"artifact": artifact_key})
