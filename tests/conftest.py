"""
Pytest fixtures and configuration for image-sizes tests.

Provides in-memory manifest inspector and cluster fakes plus sample
manifests shared across the test suite.
"""

import json
import threading

import pytest

from core.cache import ResolutionCache
from core.exceptions import ClusterQueryFailed, ManifestInspectionFailed, NodeLookupFailed
from core.interfaces import ClusterClient, ManifestInspector
from core.models import ContainerSpec, PodSpec
from core.resolver import ImageResolver

AMD64_DIGEST = "sha256:" + "a" * 64
ARM64_DIGEST = "sha256:" + "b" * 64
PINNED_HEX = "c" * 64


def image_manifest(*sizes):
    """Raw single-architecture manifest with the given layer sizes."""
    return json.dumps({
        "schemaVersion": 2,
        "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
        "config": {"size": 1469, "digest": "sha256:" + "0" * 64},
        "layers": [{"size": size, "digest": f"sha256:{i:064x}"} for i, size in enumerate(sizes)],
    }).encode()


def manifest_list(*platforms):
    """Raw manifest list from (architecture, digest) pairs."""
    return json.dumps({
        "schemaVersion": 2,
        "mediaType": "application/vnd.docker.distribution.manifest.list.v2+json",
        "manifests": [
            {"digest": digest, "size": 528, "platform": {"architecture": arch, "os": "linux"}}
            for arch, digest in platforms
        ],
    }).encode()


class FakeInspector(ManifestInspector):
    """Inspector answering from a reference -> bytes (or exception) mapping."""

    def __init__(self, manifests=None):
        self.manifests = dict(manifests or {})
        self.calls = []
        self._lock = threading.Lock()

    def name(self):
        return "fake"

    @property
    def inspection_count(self):
        return len(self.calls)

    def inspect(self, reference, cancel_token=None):
        with self._lock:
            self.calls.append(reference)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        answer = self.manifests.get(reference)
        if answer is None:
            raise ManifestInspectionFailed(reference, "manifest unknown: manifest unknown")
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeCluster(ClusterClient):
    """Cluster returning fixed pods and node architectures."""

    def __init__(self, pods=(), nodes=None):
        self.pods = list(pods)
        self.nodes = dict(nodes or {})
        self.node_lookups = []

    def list_pods(self, namespace=None, all_namespaces=False, cancel_token=None):
        if all_namespaces or namespace is None:
            return list(self.pods)
        return [pod for pod in self.pods if pod.namespace == namespace]

    def get_pod(self, name, namespace=None, cancel_token=None):
        for pod in self.pods:
            if pod.name == name and (namespace is None or pod.namespace == namespace):
                return pod
        raise ClusterQueryFailed(f"Get pod {name}", f'pods "{name}" not found')

    def get_node_architecture(self, node_name, cancel_token=None):
        self.node_lookups.append(node_name)
        if node_name not in self.nodes:
            raise NodeLookupFailed(node_name, f'nodes "{node_name}" not found')
        return self.nodes[node_name]


def make_pod(name, *images, namespace="default", node="node-1", init_images=()):
    """Build a PodSpec; containers are named after their position."""
    return PodSpec(
        name=name,
        namespace=namespace,
        node_name=node,
        init_containers=tuple(
            ContainerSpec(name=f"init-{i}", image=image) for i, image in enumerate(init_images)
        ),
        containers=tuple(
            ContainerSpec(name=f"app-{i}", image=image) for i, image in enumerate(images)
        ),
    )


@pytest.fixture
def multi_arch_manifests():
    """nginx:1.25 as a manifest list with amd64 and arm64 entries."""
    return {
        "nginx:1.25": manifest_list(("amd64", AMD64_DIGEST), ("arm64", ARM64_DIGEST)),
        f"nginx@{AMD64_DIGEST}": image_manifest(2 * 1024 * 1024, 1024 * 1024),
        f"nginx@{ARM64_DIGEST}": image_manifest(4 * 1024 * 1024),
    }


@pytest.fixture
def fake_inspector(multi_arch_manifests):
    """Inspector knowing a multi-arch nginx, a single-arch busybox and a pinned app."""
    manifests = dict(multi_arch_manifests)
    manifests["busybox:1.36"] = image_manifest(512000)
    manifests[f"ghcr.io/org/app@sha256:{PINNED_HEX}"] = image_manifest(3 * 1024 * 1024)
    return FakeInspector(manifests)


@pytest.fixture
def cache():
    return ResolutionCache()


@pytest.fixture
def resolver(fake_inspector, cache):
    return ImageResolver(fake_inspector, cache)
