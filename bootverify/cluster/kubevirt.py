"""KubeVirt REST client over httpx.

Talks to the Kubernetes API server directly (``/apis/kubevirt.io/v1``)
with a bearer token.  When no server is configured the in-cluster
service account is used, which is how the verifier runs in CI.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import httpx

from bootverify.cluster.protocol import ClusterError, NotFoundError
from bootverify.config import VerifyConfig
from bootverify.models.vm import API_VERSION, VirtualMachine, VirtualMachineInstance

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")


class KubeVirtClient:
    """Thin synchronous client for KubeVirt VM resources.

    Parameters
    ----------
    http:
        A configured ``httpx.Client`` whose ``base_url`` is the API server.
        The client is shared by all worker threads; httpx clients are
        thread-safe.
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def from_config(cls, config: VerifyConfig) -> KubeVirtClient:
        """Build a client from explicit settings or the in-cluster account."""
        server = config.cluster_server
        token = config.cluster_token
        token_file = config.cluster_token_file
        ca_file = config.cluster_ca_file

        if not server:
            host = os.environ.get("KUBERNETES_SERVICE_HOST", "")
            port = os.environ.get("KUBERNETES_SERVICE_PORT", "443")
            if not host:
                raise ClusterError(
                    "No cluster server configured and not running in-cluster. "
                    "Set BOOTVERIFY_CLUSTER_SERVER or pass --server."
                )
            server = f"https://{host}:{port}"
            token_file = token_file or SERVICE_ACCOUNT_DIR / "token"
            ca_file = ca_file or SERVICE_ACCOUNT_DIR / "ca.crt"

        if not token and token_file is not None:
            token = Path(token_file).read_text(encoding="utf-8").strip()

        verify: bool | str = True
        if config.insecure_skip_tls_verify:
            verify = False
        elif ca_file is not None:
            verify = str(ca_file)

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        http = httpx.Client(
            base_url=server,
            headers=headers,
            verify=verify,
            timeout=config.request_timeout_seconds,
        )
        return cls(http)

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # ClusterClient protocol
    # ------------------------------------------------------------------

    def create_vm(self, namespace: str, vm: VirtualMachine) -> VirtualMachine:
        manifest = vm.to_manifest()
        manifest["metadata"]["namespace"] = namespace
        data = self._request("POST", self._vm_path(namespace), json=manifest)
        return VirtualMachine.from_manifest(data)

    def get_vm(self, namespace: str, name: str) -> VirtualMachine:
        data = self._request("GET", self._vm_path(namespace, name))
        return VirtualMachine.from_manifest(data)

    def delete_vm(
        self, namespace: str, name: str, *, grace_period_seconds: int = 0
    ) -> None:
        body = {
            "kind": "DeleteOptions",
            "apiVersion": "v1",
            "gracePeriodSeconds": grace_period_seconds,
        }
        self._request("DELETE", self._vm_path(namespace, name), json=body)

    def get_vmi(self, namespace: str, name: str) -> VirtualMachineInstance:
        path = f"/apis/{API_VERSION}/namespaces/{namespace}/virtualmachineinstances/{name}"
        data = self._request("GET", path)
        return VirtualMachineInstance.from_manifest(data)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _vm_path(namespace: str, name: str = "") -> str:
        path = f"/apis/{API_VERSION}/namespaces/{namespace}/virtualmachines"
        return f"{path}/{name}" if name else path

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ClusterError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError(
                f"{method} {path}: not found", status_code=response.status_code
            )
        if response.is_error:
            raise ClusterError(
                f"{method} {path}: {response.status_code} {_status_message(response)}",
                status_code=response.status_code,
            )
        logger.debug("%s %s -> %d", method, path, response.status_code)
        if not response.content:
            return {}
        return response.json()


def _status_message(response: httpx.Response) -> str:
    """Extract the ``message`` of a Kubernetes ``Status`` body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("message", "")) or response.reason_phrase
    return response.reason_phrase
