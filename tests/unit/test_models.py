"""Tests for the data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bootverify.models.artifacts import ArtifactMetadata, ArtifactResult
from bootverify.models.reports import ArtifactFailure, VerifyReport
from bootverify.models.vm import VirtualMachine, VirtualMachineInstance


class TestArtifactModels:
    def test_describe(self):
        assert ArtifactMetadata(name="fedora", version="39").describe() == "fedora:39"

    def test_result_is_frozen(self):
        result = ArtifactResult(tags=["fedora:39"])
        with pytest.raises(ValidationError):
            result.verified = True  # type: ignore[misc]

    def test_result_defaults(self):
        assert ArtifactResult() == ArtifactResult(tags=[], verified=False)


class TestVirtualMachine:
    def test_manifest(self):
        vm = VirtualMachine(name="fedora-abcde", labels={"a": "b"}, spec={"running": True})
        manifest = vm.to_manifest()
        assert manifest["apiVersion"] == "kubevirt.io/v1"
        assert manifest["kind"] == "VirtualMachine"
        assert manifest["metadata"] == {"name": "fedora-abcde", "labels": {"a": "b"}}
        assert manifest["spec"] == {"running": True}

    def test_ready_from_status(self):
        vm = VirtualMachine.from_manifest(
            {"metadata": {"name": "x", "namespace": "kubevirt"}, "status": {"ready": True}}
        )
        assert vm.ready is True
        assert vm.namespace == "kubevirt"
        assert VirtualMachine(name="y").ready is False


class TestVirtualMachineInstance:
    def test_from_manifest(self):
        vmi = VirtualMachineInstance.from_manifest(
            {
                "metadata": {"name": "fedora-abcde", "namespace": "kubevirt"},
                "status": {
                    "phase": "Running",
                    "nodeName": "node01",
                    "interfaces": [
                        {"name": "default", "ipAddress": "10.244.0.12",
                         "ipAddresses": ["10.244.0.12", "fd10:244::c"]},
                    ],
                },
            }
        )
        assert vmi.phase == "Running"
        assert vmi.node_name == "node01"
        assert vmi.ip_address == "10.244.0.12"
        assert vmi.interfaces[0].ip_addresses[1] == "fd10:244::c"

    def test_no_interfaces(self):
        assert VirtualMachineInstance(name="x").ip_address == ""


class TestVerifyReport:
    def test_exit_code(self):
        assert VerifyReport().exit_code == 0
        failed = VerifyReport(
            failures=[ArtifactFailure(key="a:1", error_type="E", message="m")]
        )
        assert failed.ok is False
        assert failed.exit_code == 1
