"""Run-level coordinator.

Loads the results ledger, dispatches every artifact that still needs
verification to the worker pool, merges what the workers produced, and
persists the ledger before reporting failure.  A failing or cancelled run
therefore never loses work that did complete.

A hard failure in one attempt does not cancel its siblings; only the
external cancellation event does.
"""

from __future__ import annotations

import logging
import threading

from bootverify.catalog.base import Artifact
from bootverify.catalog.registry import Registry
from bootverify.core.aggregator import ResultCollector
from bootverify.core.results_store import ResultsStore
from bootverify.core.verifier import ArtifactVerifier
from bootverify.core.worker_pool import WorkerPool, WorkerPoolError
from bootverify.models.artifacts import ArtifactResult
from bootverify.models.reports import ArtifactFailure, VerifyReport


class VerifyOrchestrator:
    """Verifies every pending catalog artifact and updates the ledger.

    Parameters
    ----------
    registry:
        The artifact catalog.
    store:
        Whole-file ledger persistence.
    verifier:
        The per-artifact state machine.
    pool:
        Bounded dispatcher; fan-out width is its concern.
    logger:
        Logger for run-level progress.
    """

    def __init__(
        self,
        registry: Registry,
        store: ResultsStore,
        verifier: ArtifactVerifier,
        pool: WorkerPool,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._store = store
        self._verifier = verifier
        self._pool = pool
        self._logger = logger or logging.getLogger(__name__)

    def pending(self, ledger: dict[str, ArtifactResult]) -> list[Artifact]:
        """Artifacts with an unverified ledger record, in catalog order."""
        selected: list[Artifact] = []
        for entry in self._registry:
            if entry.skip_verification:
                continue
            record = ledger.get(entry.key)
            if record is None or record.verified:
                continue
            selected.append(entry.artifact)
        return selected

    def run(self, cancel: threading.Event | None = None) -> VerifyReport:
        """Execute one verification run and persist the ledger.

        Returns
        -------
        VerifyReport
            ``report.ok`` is ``False`` if any attempt raised.
        """
        cancel = cancel or threading.Event()
        ledger = self._store.load()
        candidates = self._pool.select(self.pending(ledger))
        candidate_keys = [a.metadata().describe() for a in candidates]
        dispatched = set(candidate_keys)
        skipped = [k for k in self._registry.keys() if k not in dispatched]
        # Workers get a snapshot; the ledger itself is only touched by the merge.
        records = {key: ledger[key] for key in candidate_keys}

        self._logger.info(
            "Verifying %d of %d artifacts (%d skipped)",
            len(candidates),
            len(self._registry),
            len(skipped),
        )

        collector = ResultCollector(capacity=len(self._registry))

        def _verify_one(artifact: Artifact) -> None:
            key = artifact.metadata().describe()
            result = self._verifier.verify(artifact, records[key], cancel)
            if result is not None:
                collector.submit(key, result)

        failures: list[ArtifactFailure] = []
        try:
            self._pool.run(candidates, _verify_one, cancel)
        except WorkerPoolError as exc:
            failures = exc.failures
        finally:
            collector.close()
            written = collector.merge_into(ledger)
            self._store.save(ledger)

        if cancel.is_set():
            self._logger.warning("Run cancelled; unfinished artifacts left unchanged")
        for failure in failures:
            self._logger.error(
                "%s: %s: %s", failure.key, failure.error_type, failure.message
            )

        return VerifyReport(
            dispatched=candidate_keys,
            verified=sorted(written),
            skipped=skipped,
            failures=failures,
            cancelled=cancel.is_set(),
        )
