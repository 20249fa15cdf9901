"""The Artifact Protocol every catalog entry satisfies.

An artifact owns three things the verifier stays generic over: the shape
of its VM, how account hints become guest-init data, and the ordered
in-guest checks that decide whether the image works.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from bootverify.models.artifacts import ArtifactMetadata, ArtifactTestParams, UserData
from bootverify.models.vm import VirtualMachine, VirtualMachineInstance

# (cancel, vmi, params) -> None; raises to fail the check.
ArtifactTestFn = Callable[
    [threading.Event, VirtualMachineInstance, ArtifactTestParams], None
]


@runtime_checkable
class Artifact(Protocol):
    """Protocol for image-producing catalog entries."""

    def metadata(self) -> ArtifactMetadata:
        ...

    def vm(self, name: str, image_ref: str, user_data: str) -> VirtualMachine:
        """Return the VM definition booting *image_ref* with *user_data*."""
        ...

    def user_data(self, data: UserData) -> str:
        """Render guest-init data granting *data*'s account access."""
        ...

    def tests(self) -> Sequence[ArtifactTestFn]:
        """Return the in-guest checks, in the order they must run."""
        ...
