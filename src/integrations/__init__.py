"""Integrations with external systems."""

from integrations.kubernetes import KubectlCluster, KubernetesConfig

__all__ = [
    "KubectlCluster",
    "KubernetesConfig",
]
