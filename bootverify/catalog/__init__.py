"""Artifact catalog: the Artifact Protocol, a generic containerDisk
implementation, and the registry the orchestrator iterates."""

from bootverify.catalog.base import Artifact, ArtifactTestFn
from bootverify.catalog.containerdisk import ContainerDiskArtifact, render_cloud_config
from bootverify.catalog.registry import (
    Registry,
    RegistryEntry,
    RegistryLoadError,
    load_registry,
)

__all__ = [
    "Artifact",
    "ArtifactTestFn",
    "ContainerDiskArtifact",
    "Registry",
    "RegistryEntry",
    "RegistryLoadError",
    "load_registry",
    "render_cloud_config",
]
