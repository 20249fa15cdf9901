"""Cluster client Protocol consumed by the verifier.

Any object with these four methods satisfies :class:`ClusterClient`.
:class:`~bootverify.cluster.kubevirt.KubeVirtClient` talks to a real
cluster; the test suite ships an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bootverify.models.vm import VirtualMachine, VirtualMachineInstance


class ClusterError(RuntimeError):
    """Raised when a cluster API call fails (transport or status)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ClusterError):
    """Raised when the requested resource does not exist."""


@runtime_checkable
class ClusterClient(Protocol):
    """Create/get/delete operations on VMs and their runtime instances."""

    def create_vm(self, namespace: str, vm: VirtualMachine) -> VirtualMachine:
        """Submit *vm* and return the resource as stored by the cluster."""
        ...

    def get_vm(self, namespace: str, name: str) -> VirtualMachine:
        ...

    def delete_vm(
        self, namespace: str, name: str, *, grace_period_seconds: int = 0
    ) -> None:
        ...

    def get_vmi(self, namespace: str, name: str) -> VirtualMachineInstance:
        """Return the live instance backing the VM called *name*."""
        ...
