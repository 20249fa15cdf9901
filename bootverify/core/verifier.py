"""Per-artifact verification lifecycle.

One attempt runs strictly in order:

1. nothing to verify -> no result
2. provision credentials, render guest-init data, build the VM
3. cancelled? -> no result
4. create the VM
5. from here on the VM is always deleted when the attempt ends
6. cancelled? -> no result
7. wait for the VM to become ready
8. fetch the running instance
9. cancelled? -> no result
10. run the artifact's tests in order, stopping at the first failure
11. all passed -> ``ArtifactResult(verified=True)``

Hard errors are logged with the artifact's context and raised.
Cancellation is never an error and never yields a result, so the
artifact's ledger entry stays as it was and the next run retries it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from bootverify.catalog.base import Artifact
from bootverify.cluster.protocol import ClusterClient
from bootverify.core.credentials import provision_credentials
from bootverify.core.readiness import PollCancelledError, wait_vm_ready
from bootverify.core.vm_builder import build_vm, image_reference
from bootverify.log import ArtifactLogAdapter, artifact_logger
from bootverify.models.artifacts import ArtifactResult
from bootverify.models.vm import VirtualMachine

DEFAULT_USERNAME = "verify"


class ArtifactVerifier:
    """Boots an artifact's image and runs its in-guest checks.

    Holds no per-attempt state, so one instance is shared by every worker.

    Parameters
    ----------
    client:
        Cluster client used for create/get/delete.
    namespace:
        Namespace the ephemeral VMs are created in.
    registry:
        Registry prefix joined with the artifact's first tag.
    timeout:
        Seconds to wait for a VM to report ready.
    logger:
        Base logger; per-artifact context is added on top.
    """

    def __init__(
        self,
        client: ClusterClient,
        *,
        namespace: str,
        registry: str,
        timeout: float = 600,
        poll_interval: float = 1.0,
        username: str = DEFAULT_USERNAME,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self.namespace = namespace
        self.registry = registry
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.username = username
        self._logger = logger or logging.getLogger(__name__)

    def verify(
        self,
        artifact: Artifact,
        result: ArtifactResult,
        cancel: threading.Event,
    ) -> ArtifactResult | None:
        """Run one verification attempt for *artifact*.

        Parameters
        ----------
        artifact:
            The catalog entry to verify.
        result:
            Its current ledger record; ``result.tags`` are the published
            images and the first one is booted.
        cancel:
            Shared cancellation event, checked between every stage.

        Returns
        -------
        ArtifactResult | None
            ``verified=True`` with the original tags on success, ``None``
            when there was nothing to verify or the run was cancelled.
        """
        log = artifact_logger(self._logger, artifact.metadata().describe())

        if not result.tags:
            log.info("No images to verify")
            return None

        image_ref = image_reference(self.registry, result.tags[0])
        try:
            credentials = provision_credentials(self.username)
            user_data = artifact.user_data(credentials.user_data())
            vm = build_vm(artifact, image_ref, user_data)
        except Exception:
            log.exception("Failed to build VM definition")
            raise

        if cancel.is_set():
            return None

        with self._provisioned_vm(vm, log) as created:
            if cancel.is_set():
                return None

            log.info("Waiting for VM %s to be ready", created.name)
            try:
                wait_vm_ready(
                    self._client,
                    self.namespace,
                    created.name,
                    timeout=self.timeout,
                    interval=self.poll_interval,
                    cancel=cancel,
                )
            except PollCancelledError:
                return None
            except Exception:
                if cancel.is_set():
                    return None
                log.exception("VM %s not ready", created.name)
                raise

            if cancel.is_set():
                return None

            try:
                vmi = self._client.get_vmi(self.namespace, created.name)
            except Exception:
                log.exception("Failed to get VMI %s", created.name)
                raise

            if cancel.is_set():
                return None

            log.info("Running %d tests on VMI %s", len(artifact.tests()), vmi.name)
            params = credentials.test_params()
            for test_fn in artifact.tests():
                if cancel.is_set():
                    return None
                try:
                    test_fn(cancel, vmi, params)
                except Exception:
                    log.exception(
                        "Test %s failed", getattr(test_fn, "__name__", repr(test_fn))
                    )
                    raise
                if cancel.is_set():
                    return None

        log.info("Tests successful")
        return ArtifactResult(tags=list(result.tags), verified=True)

    @contextmanager
    def _provisioned_vm(
        self, vm: VirtualMachine, log: ArtifactLogAdapter
    ) -> Iterator[VirtualMachine]:
        """Create *vm* and guarantee its deletion when the block exits.

        A failed create raises with nothing to clean up.  A failed delete
        is logged and never replaces the attempt's own outcome.
        """
        log.info("Creating VM %s", vm.name)
        try:
            created = self._client.create_vm(self.namespace, vm)
        except Exception:
            log.exception("Failed to create VM %s", vm.name)
            raise

        try:
            yield created
        finally:
            try:
                self._client.delete_vm(
                    self.namespace, created.name, grace_period_seconds=0
                )
                log.debug("Deleted VM %s", created.name)
            except Exception:
                log.exception("Failed to delete VM %s", created.name)
