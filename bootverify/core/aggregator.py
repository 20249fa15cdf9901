"""Collects worker results into the ledger.

Workers publish onto a bounded queue sized to the catalog, so a send
never blocks.  The queue is drained only after the collector is closed,
i.e. after every worker has returned, which keeps the merge itself
single-threaded and lock-free.
"""

from __future__ import annotations

import queue

from bootverify.models.artifacts import ArtifactResult, WorkerResult


class CollectorClosedError(RuntimeError):
    """Raised when a result is submitted after the collector was closed."""


class ResultCollector:
    """Bounded results channel between verification workers and the merge.

    Parameters
    ----------
    capacity:
        Maximum number of results, normally the number of catalog entries.
    """

    def __init__(self, capacity: int) -> None:
        self._queue: queue.Queue[WorkerResult] = queue.Queue(maxsize=max(capacity, 1))
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, key: str, result: ArtifactResult) -> None:
        """Publish *result* for *key*; safe from any worker thread.

        Raises ``queue.Full`` if more results arrive than were provisioned
        for, which means a worker sent twice.
        """
        if self._closed:
            raise CollectorClosedError(f"Result for {key!r} arrived after close")
        self._queue.put_nowait(WorkerResult(key=key, value=result))

    def close(self) -> None:
        """Mark the producing side finished.  Idempotent."""
        self._closed = True

    def drain(self) -> list[WorkerResult]:
        """Remove and return every queued result.  Requires :meth:`close`."""
        if not self._closed:
            raise RuntimeError("drain() called before close()")
        results: list[WorkerResult] = []
        while True:
            try:
                results.append(self._queue.get_nowait())
            except queue.Empty:
                return results

    def merge_into(self, ledger: dict[str, ArtifactResult]) -> list[str]:
        """Overwrite *ledger* entries with every collected result.

        Entries with no collected result are left untouched.  Returns the
        keys that were written.
        """
        written: list[str] = []
        for item in self.drain():
            ledger[item.key] = item.value
            written.append(item.key)
        return written
