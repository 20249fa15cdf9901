"""Shared test fixtures for bootverify."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from bootverify.catalog.base import ArtifactTestFn
from bootverify.catalog.containerdisk import ContainerDiskArtifact
from bootverify.catalog.registry import Registry
from bootverify.cluster.protocol import NotFoundError
from bootverify.core.results_store import ResultsStore
from bootverify.core.verifier import ArtifactVerifier
from bootverify.models.artifacts import ArtifactMetadata
from bootverify.models.vm import VirtualMachine, VirtualMachineInstance, VMIInterface


# ---------------------------------------------------------------------------
# In-memory cluster
# ---------------------------------------------------------------------------


class FakeClusterClient:
    """Thread-safe in-memory stand-in for the KubeVirt API.

    Parameters
    ----------
    ready_after:
        Number of ``get_vm`` polls that report not-ready before the VM
        turns ready.  ``None`` means the VM never becomes ready.
    failures:
        Operation name (``create_vm``, ``get_vm``, ``delete_vm``,
        ``get_vmi``) -> exception raised on every call to it.
    hooks:
        Operation name -> callable run (with the VM name) before the
        operation, e.g. to set the cancellation event mid-attempt.
    """

    def __init__(
        self,
        *,
        ready_after: int | None = 0,
        failures: dict[str, Exception] | None = None,
        hooks: dict[str, Callable[[str], None]] | None = None,
    ) -> None:
        self.ready_after = ready_after
        self.failures = failures or {}
        self.hooks = hooks or {}
        self.vms: dict[str, VirtualMachine] = {}
        self.created: list[str] = []
        self.deleted: list[tuple[str, int]] = []
        self.polls: dict[str, int] = {}
        self._lock = threading.Lock()

    def _enter(self, op: str, name: str) -> None:
        hook = self.hooks.get(op)
        if hook is not None:
            hook(name)
        exc = self.failures.get(op)
        if exc is not None:
            raise exc

    def create_vm(self, namespace: str, vm: VirtualMachine) -> VirtualMachine:
        self._enter("create_vm", vm.name)
        stored = vm.model_copy(update={"namespace": namespace})
        with self._lock:
            self.vms[vm.name] = stored
            self.created.append(vm.name)
        return stored

    def get_vm(self, namespace: str, name: str) -> VirtualMachine:
        self._enter("get_vm", name)
        with self._lock:
            if name not in self.vms:
                raise NotFoundError(f"virtualmachine {name} not found", status_code=404)
            count = self.polls.get(name, 0)
            self.polls[name] = count + 1
            vm = self.vms[name]
        ready = self.ready_after is not None and count >= self.ready_after
        return vm.model_copy(update={"status": {"ready": ready}})

    def delete_vm(
        self, namespace: str, name: str, *, grace_period_seconds: int = 0
    ) -> None:
        with self._lock:
            self.deleted.append((name, grace_period_seconds))
        self._enter("delete_vm", name)
        with self._lock:
            self.vms.pop(name, None)

    def get_vmi(self, namespace: str, name: str) -> VirtualMachineInstance:
        self._enter("get_vmi", name)
        with self._lock:
            if name not in self.vms:
                raise NotFoundError(f"virtualmachineinstance {name} not found")
        return VirtualMachineInstance(
            name=name,
            namespace=namespace,
            phase="Running",
            interfaces=[VMIInterface(name="default", ip_address="10.0.2.2")],
        )


class RecordingTest:
    """An in-guest test function that records its calls."""

    def __init__(
        self,
        name: str,
        *,
        error: Exception | None = None,
        on_call: Callable[[], None] | None = None,
    ) -> None:
        self.__name__ = name
        self.error = error
        self.on_call = on_call
        self.calls: list[tuple[VirtualMachineInstance, Any]] = []

    def __call__(self, cancel: threading.Event, vmi: VirtualMachineInstance, params: Any) -> None:
        self.calls.append((vmi, params))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cluster() -> FakeClusterClient:
    """Provide a cluster whose VMs are ready on the first poll."""
    return FakeClusterClient()


@pytest.fixture
def cancel() -> threading.Event:
    """Provide an unset cancellation event."""
    return threading.Event()


@pytest.fixture
def make_artifact() -> Callable[..., ContainerDiskArtifact]:
    """Factory fixture: build a ContainerDiskArtifact with given tests."""

    def _factory(
        name: str = "fedora",
        version: str = "39",
        tests: Sequence[ArtifactTestFn] = (),
    ) -> ContainerDiskArtifact:
        return ContainerDiskArtifact(
            ArtifactMetadata(name=name, version=version), tests=tests
        )

    return _factory


@pytest.fixture
def make_verifier() -> Callable[..., ArtifactVerifier]:
    """Factory fixture: an ArtifactVerifier with a fast poll interval."""

    def _factory(client: Any, **overrides: Any) -> ArtifactVerifier:
        defaults: dict[str, Any] = {
            "namespace": "kubevirt",
            "registry": "quay.io/containerdisks",
            "timeout": 5,
            "poll_interval": 0.01,
        }
        defaults.update(overrides)
        return ArtifactVerifier(client, **defaults)

    return _factory


@pytest.fixture
def results_store(tmp_path: Path) -> ResultsStore:
    """Provide a ResultsStore backed by a temp JSON file."""
    return ResultsStore(tmp_path / "results.json")


@pytest.fixture
def registry() -> Registry:
    """Provide an empty Registry."""
    return Registry()
