"""
Domain models for image resolution and pod reporting.

This module defines the core data structures used throughout the application.
All models are immutable (frozen dataclasses) to prevent accidental mutation.
"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional

from constants import DIGEST_PREFIX, TAG_UNSPECIFIED


@dataclass(frozen=True)
class ImageReference:
    """
    Parsed container image reference.

    Attributes:
        repository: Registry and repository path (e.g., "ghcr.io/org/app")
        tag: Tag, or TAG_UNSPECIFIED when the reference carries none
        digest: Hex part of a sha256 digest, without the "sha256:" prefix
    """

    repository: str
    tag: str = TAG_UNSPECIFIED
    digest: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """A reference is only unusable when it has no repository."""
        return bool(self.repository)

    @property
    def has_tag(self) -> bool:
        return self.tag != TAG_UNSPECIFIED

    @property
    def qualified_digest(self) -> Optional[str]:
        """Digest with its algorithm prefix (e.g., "sha256:abc")."""
        if not self.digest:
            return None
        return f"{DIGEST_PREFIX}{self.digest}"

    @property
    def tag_reference(self) -> str:
        """Tag-qualified reference (repository alone when no tag was given)."""
        if self.has_tag:
            return f"{self.repository}:{self.tag}"
        return self.repository

    @property
    def inspectable_reference(self) -> str:
        """
        Reference handed to the manifest inspector.

        The digest always takes precedence over the tag.
        """
        if self.digest:
            return f"{self.repository}@{self.qualified_digest}"
        return self.tag_reference


@dataclass(frozen=True)
class ManifestDescriptor:
    """
    One platform entry of a manifest list.

    Attributes:
        architecture: CPU architecture (e.g., "amd64", "arm64")
        digest: Digest of the platform-specific manifest
        os: Operating system, when present
        variant: CPU variant (e.g., "v8"), when present
    """

    architecture: str
    digest: str
    os: Optional[str] = None
    variant: Optional[str] = None

    @property
    def platform(self) -> str:
        """Platform string such as "linux/arm64/v8"."""
        parts = [self.os, self.architecture, self.variant]
        return "/".join(part for part in parts if part)


@dataclass(frozen=True)
class ImageRecord:
    """
    Resolved image details for one container.

    Attributes:
        container_name: Container the image belongs to
        repository: Repository without tag or digest
        tag: Tag from the container spec, or TAG_UNSPECIFIED
        digest: Digest of the manifest the sizes were read from ("sha256:..."),
            None for single-architecture images referenced by tag
        size_bytes: Sum of all layer sizes
        size_formatted: Human-readable size (e.g., "3 MB")
    """

    container_name: str
    repository: str
    tag: str
    digest: Optional[str]
    size_bytes: int
    size_formatted: str

    def with_labels(self, container_name: str, tag: str) -> "ImageRecord":
        """Return a copy labelled for the requesting container."""
        if container_name == self.container_name and tag == self.tag:
            return self
        return replace(self, container_name=container_name, tag=tag)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "container_name": self.container_name,
            "repository": self.repository,
            "tag": self.tag,
            "digest": self.digest,
            "size_bytes": self.size_bytes,
            "size": self.size_formatted,
        }


@dataclass(frozen=True)
class ContainerSpec:
    """Container name and image URI as declared on a pod spec."""

    name: str
    image: str


@dataclass(frozen=True)
class PodSpec:
    """
    The parts of a pod the report needs.

    Attributes:
        name: Pod name
        namespace: Pod namespace
        node_name: Node the pod is scheduled on (None while pending)
        init_containers: Init containers in declared order
        containers: Regular containers in declared order
    """

    name: str
    namespace: str
    node_name: Optional[str] = None
    init_containers: tuple[ContainerSpec, ...] = ()
    containers: tuple[ContainerSpec, ...] = ()

    @property
    def all_containers(self) -> Iterator[ContainerSpec]:
        """Init containers first, then regular containers."""
        yield from self.init_containers
        yield from self.containers


@dataclass(frozen=True)
class PodReport:
    """
    Image report for a single pod.

    Attributes:
        pod_name: Pod name
        namespace: Pod namespace
        images: One record per container, init containers first
    """

    pod_name: str
    namespace: str
    images: tuple[ImageRecord, ...] = ()

    @property
    def total_size_bytes(self) -> int:
        return sum(image.size_bytes for image in self.images)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "pod_name": self.pod_name,
            "namespace": self.namespace,
            "images": [image.to_dict() for image in self.images],
        }


@dataclass(frozen=True)
class ScanWarning:
    """
    A pod skipped during a namespace or cluster scan.

    Attributes:
        pod_name: Skipped pod
        namespace: Namespace of the skipped pod
        message: Diagnostic naming the container, image and cause
        category: Error category from ErrorClassifier
    """

    pod_name: str
    namespace: str
    message: str
    category: str = "unknown"


@dataclass(frozen=True)
class ScanResult:
    """
    Results of a namespace or cluster scan.

    Attributes:
        reports: Pod reports that resolved completely
        warnings: One entry per skipped pod
        cancelled: Whether the scan stopped early (signal or timeout)
    """

    reports: tuple[PodReport, ...] = ()
    warnings: tuple[ScanWarning, ...] = ()
    cancelled: bool = False

    def sorted_reports(self) -> list[PodReport]:
        """Reports ordered by (namespace, pod name) for stable output."""
        return sorted(self.reports, key=lambda r: (r.namespace, r.pod_name))

    @property
    def pods_total(self) -> int:
        return len(self.reports) + len(self.warnings)


__all__ = [
    "ImageReference",
    "ManifestDescriptor",
    "ImageRecord",
    "ContainerSpec",
    "PodSpec",
    "PodReport",
    "ScanWarning",
    "ScanResult",
]
