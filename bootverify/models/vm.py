"""Cluster resource models for KubeVirt virtual machines.

Only the fields the verifier reads are parsed; the full manifest is kept
in ``spec``/``status`` so artifacts can shape VMs freely.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

API_VERSION = "kubevirt.io/v1"


class VirtualMachine(BaseModel):
    """A KubeVirt ``VirtualMachine`` resource."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    spec: dict[str, Any] = Field(default_factory=dict)
    status: dict[str, Any] = Field(default_factory=dict)

    @property
    def ready(self) -> bool:
        """Whether the cluster reports the VM as ready."""
        return bool(self.status.get("ready", False))

    def to_manifest(self) -> dict[str, Any]:
        """Render the resource as a Kubernetes object for submission."""
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return {
            "apiVersion": API_VERSION,
            "kind": "VirtualMachine",
            "metadata": metadata,
            "spec": self.spec,
        }

    @classmethod
    def from_manifest(cls, data: dict[str, Any]) -> VirtualMachine:
        metadata = data.get("metadata", {})
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            labels=metadata.get("labels") or {},
            spec=data.get("spec") or {},
            status=data.get("status") or {},
        )


class VMIInterface(BaseModel):
    """A network interface reported on a running instance."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    ip_address: str = ""
    ip_addresses: list[str] = Field(default_factory=list)


class VirtualMachineInstance(BaseModel):
    """A live ``VirtualMachineInstance``: the runtime handle for tests."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = ""
    phase: str = ""
    node_name: str = ""
    interfaces: list[VMIInterface] = Field(default_factory=list)

    @property
    def ip_address(self) -> str:
        """Primary address of the first interface, or ``""``."""
        for iface in self.interfaces:
            if iface.ip_address:
                return iface.ip_address
        return ""

    @classmethod
    def from_manifest(cls, data: dict[str, Any]) -> VirtualMachineInstance:
        metadata = data.get("metadata", {})
        status = data.get("status") or {}
        interfaces = [
            VMIInterface(
                name=iface.get("name", ""),
                ip_address=iface.get("ipAddress", ""),
                ip_addresses=iface.get("ipAddresses") or [],
            )
            for iface in status.get("interfaces") or []
        ]
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            phase=status.get("phase", ""),
            node_name=status.get("nodeName", ""),
            interfaces=interfaces,
        )
