"""
Collaborator interfaces for manifest inspection and cluster access.

Defines the contracts the resolution core consumes, enabling different
backends (docker, skopeo, kubectl, or in-memory fakes in tests) to be
plugged in.
"""

from abc import ABC, abstractmethod
from typing import Optional

from core.cancellation import CancellationToken
from core.models import PodSpec


class ManifestInspector(ABC):
    """
    Abstract base class for manifest inspection backends.

    An inspection is one potentially slow, fallible call (typically a
    registry round trip through an external binary). Implementations must
    not retry on their own.
    """

    @abstractmethod
    def name(self) -> str:
        """
        Return the backend name.

        Returns:
            Backend identifier (e.g., "docker", "skopeo")
        """
        pass

    @abstractmethod
    def inspect(
        self,
        reference: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> bytes:
        """
        Fetch the raw manifest for a fully qualified reference.

        Args:
            reference: Reference such as "repo:tag" or "repo@sha256:..."
            cancel_token: Token that aborts the call when set

        Returns:
            Raw manifest bytes (image manifest or manifest list)

        Raises:
            ManifestInspectionFailed: If the manifest cannot be retrieved
            ScanCancelled: If the call was cancelled
        """
        pass


class ClusterClient(ABC):
    """
    Abstract base class for cluster access.

    Supplies pod listings and node architectures to the report aggregator.
    """

    @abstractmethod
    def list_pods(
        self,
        namespace: Optional[str] = None,
        all_namespaces: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> list[PodSpec]:
        """
        List pods in a namespace or across the cluster.

        Args:
            namespace: Namespace to list (None for the current context's)
            all_namespaces: List pods in every namespace
            cancel_token: Token that aborts the call when set

        Returns:
            Pods with their container specs

        Raises:
            ClusterQueryFailed: If the listing fails
        """
        pass

    @abstractmethod
    def get_pod(
        self,
        name: str,
        namespace: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PodSpec:
        """
        Fetch a single pod.

        Raises:
            ClusterQueryFailed: If the pod cannot be fetched
        """
        pass

    @abstractmethod
    def get_node_architecture(
        self,
        node_name: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Return the CPU architecture of a node (e.g., "amd64").

        Raises:
            NodeLookupFailed: If the architecture cannot be determined
        """
        pass


__all__ = [
    "ManifestInspector",
    "ClusterClient",
]
