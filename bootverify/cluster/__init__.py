"""Cluster access: the client Protocol and a KubeVirt REST implementation."""

from bootverify.cluster.kubevirt import KubeVirtClient
from bootverify.cluster.protocol import ClusterClient, ClusterError, NotFoundError

__all__ = ["ClusterClient", "ClusterError", "KubeVirtClient", "NotFoundError"]
