"""Bounded fan-out over the artifact catalog.

Each catalog entry is handed to the per-artifact callback on a
``ThreadPoolExecutor`` of fixed width.  A callback raising does not stop
its siblings: every failure is recorded, every dispatched artifact runs
to completion, and the failures are raised together at the end.

Once the shared cancellation event is set, artifacts that have not yet
started are not started.
"""

from __future__ import annotations

import fnmatch
import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from bootverify.catalog.base import Artifact
from bootverify.models.reports import ArtifactFailure

logger = logging.getLogger(__name__)

ArtifactCallback = Callable[[Artifact], None]


class WorkerPoolError(RuntimeError):
    """Raised after the pool finishes when at least one callback failed."""

    def __init__(self, failures: list[ArtifactFailure]) -> None:
        self.failures = failures
        keys = ", ".join(f.key for f in failures)
        super().__init__(f"{len(failures)} artifact(s) failed verification: {keys}")


def matches_focus(key: str, focus: str) -> bool:
    """Return ``True`` if *key* is selected by the glob *focus* (empty = all)."""
    return not focus or fnmatch.fnmatchcase(key, focus)


class WorkerPool:
    """Runs one callback per artifact with bounded concurrency.

    Parameters
    ----------
    workers:
        Maximum number of callbacks running at once.
    focus:
        Optional glob on the artifact identity; non-matching artifacts
        are never dispatched.
    """

    def __init__(self, workers: int = 1, *, focus: str = "") -> None:
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers
        self.focus = focus

    def select(self, artifacts: Iterable[Artifact]) -> list[Artifact]:
        return [
            a for a in artifacts if matches_focus(a.metadata().describe(), self.focus)
        ]

    def run(
        self,
        artifacts: Iterable[Artifact],
        callback: ArtifactCallback,
        cancel: threading.Event,
    ) -> None:
        """Invoke *callback* for every selected artifact.

        Raises
        ------
        WorkerPoolError
            After all callbacks have returned, if any of them raised.
        """
        selected = self.select(artifacts)
        failures: list[ArtifactFailure] = []

        def _guarded(artifact: Artifact) -> None:
            if cancel.is_set():
                return
            callback(artifact)

        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="verify"
        ) as executor:
            futures: dict[Future[None], str] = {
                executor.submit(_guarded, artifact): artifact.metadata().describe()
                for artifact in selected
            }
            for future in as_completed(futures):
                key = futures[future]
                exc = future.exception()
                if exc is None:
                    continue
                logger.error("Verification of %s failed: %s", key, exc)
                failures.append(
                    ArtifactFailure(
                        key=key, error_type=type(exc).__name__, message=str(exc)
                    )
                )

        if failures:
            failures.sort(key=lambda f: f.key)
            raise WorkerPoolError(failures)
