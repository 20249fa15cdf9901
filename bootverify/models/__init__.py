"""bootverify data models: all Pydantic v2, all frozen (immutable)."""

from bootverify.models.artifacts import (
    ArtifactMetadata,
    ArtifactResult,
    ArtifactTestParams,
    UserData,
    WorkerResult,
)
from bootverify.models.reports import ArtifactFailure, VerifyReport
from bootverify.models.vm import VirtualMachine, VirtualMachineInstance, VMIInterface

__all__ = [
    # artifacts
    "ArtifactMetadata",
    "ArtifactResult",
    "ArtifactTestParams",
    "UserData",
    "WorkerResult",
    # vm
    "VirtualMachine",
    "VirtualMachineInstance",
    "VMIInterface",
    # reports
    "ArtifactFailure",
    "VerifyReport",
]
