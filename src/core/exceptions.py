"""
Exception hierarchy for image-sizes.

Provides a standardized exception hierarchy for consistent error handling
across the application. All exceptions inherit from ImageSizesException.

Container-level resolution errors (inspection, decode, architecture, node
lookup) fail the enclosing pod report; the aggregator decides whether that
is fatal to the run.
"""

from typing import Optional, Sequence


class ImageSizesException(Exception):
    """Base exception for all image-sizes errors."""
    pass


class ManifestInspectionFailed(ImageSizesException):
    """The manifest inspection collaborator could not return a manifest."""

    def __init__(self, reference: str, diagnostic: str):
        """
        Initialize inspection failure.

        Args:
            reference: Fully qualified reference that was inspected
            diagnostic: Raw diagnostic text from the inspection tool
        """
        self.reference = reference
        self.diagnostic = diagnostic.strip()
        super().__init__(f"Manifest inspection failed for {reference}: {self.diagnostic}")


class ManifestDecodeFailed(ImageSizesException):
    """Manifest bytes were not a decodable JSON manifest."""

    def __init__(self, reference: str, reason: str):
        """
        Initialize decode failure.

        Args:
            reference: Reference whose manifest could not be decoded
            reason: Decoder error text
        """
        self.reference = reference
        self.reason = reason
        super().__init__(f"Failed to parse manifest for {reference}: {reason}")


class NoMatchingArchitecture(ImageSizesException):
    """A manifest list has no entry for the requested architecture."""

    def __init__(
        self,
        repository: str,
        requested_arch: str,
        available: Sequence[str] = (),
    ):
        """
        Initialize architecture mismatch.

        Args:
            repository: Repository whose manifest list was searched
            requested_arch: Architecture of the pod's node
            available: Architectures present in the manifest list
        """
        self.repository = repository
        self.requested_arch = requested_arch
        self.available = tuple(available)
        found = ", ".join(self.available) if self.available else "none"
        super().__init__(
            f"No manifest for architecture {requested_arch} in {repository} (available: {found})"
        )


class NodeLookupFailed(ImageSizesException):
    """The architecture of a pod's node could not be determined."""

    def __init__(self, node_name: Optional[str], reason: str):
        self.node_name = node_name
        self.reason = reason
        node = node_name or "<unscheduled>"
        super().__init__(f"Node lookup failed for {node}: {reason}")


class InvalidImageReference(ImageSizesException):
    """Image reference has no repository to inspect."""

    def __init__(self, image: str):
        self.image = image
        super().__init__(f"Invalid image reference: {image!r}")


class PodReportFailed(ImageSizesException):
    """A container failed to resolve, so the whole pod report is rejected."""

    def __init__(
        self,
        pod_name: str,
        namespace: str,
        container_name: Optional[str],
        image: Optional[str],
        cause: Exception,
    ):
        """
        Initialize pod report failure.

        Args:
            pod_name: Pod being reported
            namespace: Namespace of the pod
            container_name: Container that failed (None for pod-level failures)
            image: Image URI of the failing container
            cause: Underlying container-level error
        """
        self.pod_name = pod_name
        self.namespace = namespace
        self.container_name = container_name
        self.image = image
        self.cause = cause
        if container_name:
            where = f"container {container_name} ({image})"
        else:
            where = "pod"
        super().__init__(f"Pod {namespace}/{pod_name}: {where}: {cause}")


class ClusterQueryFailed(ImageSizesException):
    """Cluster listing or lookup through kubectl failed."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason.strip()
        super().__init__(f"{operation} failed: {self.reason}")


class ScanCancelled(ImageSizesException):
    """The scan was cancelled (signal or timeout) while work was outstanding."""

    def __init__(self, reason: str = "scan cancelled"):
        self.reason = reason
        super().__init__(reason)


class ValidationException(ImageSizesException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None):
        """
        Initialize validation exception.

        Args:
            message: Validation error message
            field: Field that failed validation (optional)
        """
        self.field = field
        if field:
            super().__init__(f"Validation failed for {field}: {message}")
        else:
            super().__init__(f"Validation failed: {message}")


class OutputException(ImageSizesException):
    """Output generation failed."""

    def __init__(self, format_type: str, reason: str):
        """
        Initialize output exception.

        Args:
            format_type: Output format (table, json, yaml)
            reason: Reason for failure
        """
        self.format_type = format_type
        self.reason = reason
        super().__init__(f"Failed to generate {format_type} output: {reason}")


class ConfigurationException(ImageSizesException):
    """Configuration is invalid or missing."""
    pass


CONTAINER_ERRORS = (
    ManifestInspectionFailed,
    ManifestDecodeFailed,
    NoMatchingArchitecture,
    NodeLookupFailed,
    InvalidImageReference,
)
"""Errors that fail a single container and therefore its pod."""


__all__ = [
    "ImageSizesException",
    "ManifestInspectionFailed",
    "ManifestDecodeFailed",
    "NoMatchingArchitecture",
    "NodeLookupFailed",
    "InvalidImageReference",
    "PodReportFailed",
    "ClusterQueryFailed",
    "ScanCancelled",
    "ValidationException",
    "OutputException",
    "ConfigurationException",
    "CONTAINER_ERRORS",
]
