"""Generic containerDisk artifact.

Most images need nothing more than a containerDisk root volume, a
cloud-init NoCloud disk, and a memory request.  Artifacts with special
needs implement the :class:`~bootverify.catalog.base.Artifact` Protocol
themselves.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import yaml

from bootverify.catalog.base import ArtifactTestFn
from bootverify.models.artifacts import ArtifactMetadata, UserData
from bootverify.models.vm import VirtualMachine

CLOUD_CONFIG_HEADER = "#cloud-config\n"


def render_cloud_config(data: UserData) -> str:
    """Render a cloud-config document creating *data*'s account.

    The account gets passwordless sudo and key-only SSH access.
    """
    document = {
        "users": [
            {
                "name": data.username,
                "sudo": "ALL=(ALL) NOPASSWD:ALL",
                "shell": "/bin/bash",
                "lock_passwd": True,
                "ssh_authorized_keys": list(data.authorized_keys),
            }
        ],
        "ssh_pwauth": False,
    }
    return CLOUD_CONFIG_HEADER + yaml.safe_dump(document, sort_keys=False)


class ContainerDiskArtifact:
    """An artifact booting straight from a containerDisk image.

    Parameters
    ----------
    metadata:
        Identity of the artifact.
    tests:
        In-guest checks, run in order.
    memory:
        Guest memory request, e.g. ``"1Gi"``.
    preference:
        Optional ``VirtualMachineClusterPreference`` name.
    """

    def __init__(
        self,
        metadata: ArtifactMetadata,
        tests: Sequence[ArtifactTestFn] = (),
        *,
        memory: str = "1Gi",
        preference: str = "",
    ) -> None:
        self._metadata = metadata
        self._tests = tuple(tests)
        self.memory = memory
        self.preference = preference

    def metadata(self) -> ArtifactMetadata:
        return self._metadata

    def user_data(self, data: UserData) -> str:
        return render_cloud_config(data)

    def tests(self) -> Sequence[ArtifactTestFn]:
        return self._tests

    def vm(self, name: str, image_ref: str, user_data: str) -> VirtualMachine:
        template_spec: dict[str, Any] = {
            "domain": {
                "devices": {
                    "disks": [
                        {"name": "containerdisk", "disk": {"bus": "virtio"}},
                        {"name": "cloudinitdisk", "disk": {"bus": "virtio"}},
                    ],
                },
                "resources": {"requests": {"memory": self.memory}},
            },
            "terminationGracePeriodSeconds": 0,
            "volumes": [
                {"name": "containerdisk", "containerDisk": {"image": image_ref}},
                {"name": "cloudinitdisk", "cloudInitNoCloud": {"userData": user_data}},
            ],
        }
        spec: dict[str, Any] = {
            "running": True,
            "template": {
                "metadata": {"labels": {"kubevirt.io/domain": name}},
                "spec": template_spec,
            },
        }
        if self.preference:
            spec["preference"] = {
                "kind": "VirtualMachineClusterPreference",
                "name": self.preference,
            }
        return VirtualMachine(
            name=name,
            labels={"app.kubernetes.io/managed-by": "bootverify"},
            spec=spec,
        )
