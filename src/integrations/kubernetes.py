"""
Kubernetes cluster access through kubectl.

Lists pods with their container specs and looks up node architectures
for the report aggregator.
"""

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from constants import KUBECTL_TIMEOUT
from core.cancellation import CancellationToken
from core.exceptions import ClusterQueryFailed, NodeLookupFailed
from core.interfaces import ClusterClient
from core.models import ContainerSpec, PodSpec
from utils.command import run_command

logger = logging.getLogger(__name__)


@dataclass
class KubernetesConfig:
    """
    Kubernetes connection configuration.

    Attributes:
        kubeconfig: Path to kubeconfig (falls back to $KUBECONFIG, then ~/.kube/config)
        context: Context to use instead of the current one
    """
    kubeconfig: Optional[str] = None
    context: Optional[str] = None

    def resolved_kubeconfig(self) -> Optional[str]:
        """Kubeconfig path actually used, or None to let kubectl decide."""
        if self.kubeconfig:
            return self.kubeconfig

        from_env = os.environ.get("KUBECONFIG")
        if from_env:
            return from_env

        default = Path.home() / ".kube" / "config"
        if default.exists():
            return str(default)
        return None

    def get_kubectl_args(self) -> list[str]:
        """Get kubectl command arguments."""
        args = []
        kubeconfig = self.resolved_kubeconfig()
        if kubeconfig:
            args.append(f"--kubeconfig={kubeconfig}")
        if self.context:
            args.append(f"--context={self.context}")
        return args


def pod_from_manifest(item: dict[str, Any]) -> PodSpec:
    """
    Build a PodSpec from a pod object as returned by kubectl.

    Args:
        item: Pod object (metadata, spec)

    Returns:
        PodSpec with init and regular containers in declared order
    """
    metadata = item.get("metadata") or {}
    spec = item.get("spec") or {}

    def containers(key: str) -> tuple[ContainerSpec, ...]:
        return tuple(
            ContainerSpec(name=c.get("name", ""), image=c.get("image", ""))
            for c in spec.get(key) or []
        )

    return PodSpec(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        node_name=spec.get("nodeName") or None,
        init_containers=containers("initContainers"),
        containers=containers("containers"),
    )


class KubectlCluster(ClusterClient):
    """
    ClusterClient backed by the kubectl binary.

    Node architectures are memoized for the lifetime of the client, so a
    node shared by many pods is queried once.
    """

    def __init__(
        self,
        config: Optional[KubernetesConfig] = None,
        timeout: float = KUBECTL_TIMEOUT,
    ):
        """
        Initialize cluster client.

        Args:
            config: Kubernetes configuration
            timeout: Timeout for kubectl operations
        """
        self.config = config or KubernetesConfig()
        self.timeout = timeout
        self._kubectl_args = self.config.get_kubectl_args()
        self._node_architectures: dict[str, str] = {}
        self._lock = threading.Lock()

    def _kubectl_json(
        self,
        args: list[str],
        operation: str,
        cancel_token: Optional[CancellationToken],
    ) -> dict[str, Any]:
        """
        Run a kubectl query with JSON output.

        Raises:
            ClusterQueryFailed: If kubectl fails or returns invalid JSON
        """
        cmd = ["kubectl"] + self._kubectl_args + args + ["-o", "json"]
        result = run_command(cmd, timeout=self.timeout, cancel_token=cancel_token)

        if not result.success:
            raise ClusterQueryFailed(operation, result.diagnostic or f"kubectl exited {result.returncode}")

        try:
            data = json.loads(result.stdout)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ClusterQueryFailed(operation, f"invalid JSON from kubectl: {e}") from e

        if not isinstance(data, dict):
            raise ClusterQueryFailed(operation, "unexpected kubectl output")
        return data

    def list_pods(
        self,
        namespace: Optional[str] = None,
        all_namespaces: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> list[PodSpec]:
        args = ["get", "pods"]
        if all_namespaces:
            args.append("--all-namespaces")
        elif namespace:
            args += ["-n", namespace]

        data = self._kubectl_json(args, "List pods", cancel_token)
        pods = [pod_from_manifest(item) for item in data.get("items") or []]
        logger.debug(f"Found {len(pods)} pods")
        return pods

    def get_pod(
        self,
        name: str,
        namespace: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PodSpec:
        args = ["get", "pod", name]
        if namespace:
            args += ["-n", namespace]

        data = self._kubectl_json(args, f"Get pod {name}", cancel_token)
        return pod_from_manifest(data)

    def get_node_architecture(
        self,
        node_name: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        with self._lock:
            cached = self._node_architectures.get(node_name)
        if cached:
            return cached

        try:
            data = self._kubectl_json(["get", "node", node_name], f"Get node {node_name}", cancel_token)
        except ClusterQueryFailed as e:
            raise NodeLookupFailed(node_name, e.reason) from e

        architecture = ((data.get("status") or {}).get("nodeInfo") or {}).get("architecture")
        if not architecture:
            raise NodeLookupFailed(node_name, "node reports no architecture")

        logger.debug(f"Node {node_name} architecture: {architecture}")
        with self._lock:
            self._node_architectures.setdefault(node_name, architecture)
        return architecture


__all__ = ["KubernetesConfig", "KubectlCluster", "pod_from_manifest"]
