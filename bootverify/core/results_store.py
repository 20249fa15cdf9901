"""Results ledger persistence: one JSON document, read and written whole.

Layout::

    {
      "fedora:39": {"tags": ["fedora:39", "fedora:39-2024..."], "verified": true},
      ...
    }

Writes go to a sibling temp file that is then renamed over the target,
so an interrupted save never leaves a truncated ledger behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from bootverify.models.artifacts import ArtifactResult

logger = logging.getLogger(__name__)

_LEDGER_ADAPTER = TypeAdapter(dict[str, ArtifactResult])


class ResultsFileError(RuntimeError):
    """Raised when the results file exists but cannot be parsed."""


class ResultsStore:
    """Whole-file reader/writer for the results ledger.

    Parameters
    ----------
    path:
        Location of the JSON results file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, ArtifactResult]:
        """Read the ledger.  A missing file is an empty ledger."""
        if not self.path.exists():
            logger.warning("Results file %s does not exist; starting empty", self.path)
            return {}
        raw = self.path.read_bytes()
        if not raw.strip():
            return {}
        try:
            return dict(_LEDGER_ADAPTER.validate_json(raw))
        except ValidationError as exc:
            raise ResultsFileError(f"Malformed results file {self.path}: {exc}") from exc

    def save(self, results: dict[str, ArtifactResult]) -> None:
        """Replace the ledger with *results* (keys written sorted)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            key: results[key].model_dump(mode="json") for key in sorted(results)
        }
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(json.dumps(payload, indent=2) + "\n")
        try:
            os.replace(tmp.name, self.path)
        except OSError:
            os.unlink(tmp.name)
            raise
        logger.debug("Wrote %d results to %s", len(payload), self.path)
