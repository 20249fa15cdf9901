"""Verification core: credentials, VM construction, readiness, the
per-artifact state machine, result collection, and orchestration."""

from bootverify.core.aggregator import ResultCollector
from bootverify.core.orchestrator import VerifyOrchestrator
from bootverify.core.results_store import ResultsStore
from bootverify.core.verifier import ArtifactVerifier
from bootverify.core.worker_pool import WorkerPool, WorkerPoolError

__all__ = [
    "ArtifactVerifier",
    "ResultCollector",
    "ResultsStore",
    "VerifyOrchestrator",
    "WorkerPool",
    "WorkerPoolError",
]
