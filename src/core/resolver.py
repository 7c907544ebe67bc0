"""
Image resolution engine.

Turns a container's image URI into an ImageRecord: parse the reference,
inspect the manifest, resolve the node's platform when the tag points at a
manifest list, then total the layer sizes. Records are memoized in a
ResolutionCache keyed by the final resolved reference.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.cache import ResolutionCache
from core.cancellation import CancellationToken
from core.exceptions import InvalidImageReference, NodeLookupFailed
from core.interfaces import ManifestInspector
from core.manifest import (
    decode_manifest_list,
    load_manifest,
    select_platform_digest,
    sum_layer_sizes,
)
from core.models import ImageRecord, ImageReference
from core.reference import parse_image_reference
from utils.formatting import format_size

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    """Progress of a single image resolution."""

    UNRESOLVED = "unresolved"
    """Reference parsed, manifest not yet examined"""

    ARCHITECTURE_CHECKED = "architecture_checked"
    """Final reference (cache key) known"""

    SIZED = "sized"
    """ImageRecord available"""


@dataclass
class _Resolution:
    """Mutable working state for one resolve() call."""

    reference: ImageReference
    container_name: str
    node_architecture: Optional[str]
    state: ResolutionState = ResolutionState.UNRESOLVED
    key: Optional[str] = None
    digest: Optional[str] = None
    manifest: Optional[dict[str, Any]] = None
    pinned: bool = False
    record: Optional[ImageRecord] = None


class ImageResolver:
    """
    Resolves container images to sized, digest-aware records.

    Tag-only references always cost one inspection because the cache key
    is unknown until the manifest is read. A manifest list costs a second
    inspection of the platform manifest unless that digest is cached.
    Digest-pinned references are looked up in the cache before any
    inspection and are never architecture-resolved.
    """

    def __init__(self, inspector: ManifestInspector, cache: ResolutionCache):
        """
        Initialize resolver.

        Args:
            inspector: Manifest inspection backend
            cache: Resolution cache shared by all callers of this run
        """
        self.inspector = inspector
        self.cache = cache
        self._transitions = {
            ResolutionState.UNRESOLVED: self._check_architecture,
            ResolutionState.ARCHITECTURE_CHECKED: self._compute_size,
        }

    def resolve(
        self,
        image_uri: str,
        container_name: str,
        node_architecture: Optional[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> ImageRecord:
        """
        Resolve one container image.

        Args:
            image_uri: Image URI from the container spec
            container_name: Name of the container
            node_architecture: Architecture of the pod's node (e.g., "amd64")
            cancel_token: Token that aborts outstanding inspections

        Returns:
            ImageRecord labelled with this container's name and tag

        Raises:
            InvalidImageReference: If the URI has no repository
            ManifestInspectionFailed: If an inspection fails
            ManifestDecodeFailed: If a manifest is not valid JSON
            NoMatchingArchitecture: If the manifest list lacks the node's architecture
            NodeLookupFailed: If a manifest list needs an architecture and none is known
            ScanCancelled: If the cancel token is set
        """
        reference = parse_image_reference(image_uri)
        if not reference.is_valid:
            raise InvalidImageReference(image_uri)

        resolution = _Resolution(
            reference=reference,
            container_name=container_name,
            node_architecture=node_architecture,
        )
        while resolution.state != ResolutionState.SIZED:
            self._transitions[resolution.state](resolution, cancel_token)

        return resolution.record

    def _check_architecture(
        self,
        resolution: _Resolution,
        cancel_token: Optional[CancellationToken],
    ) -> None:
        """UNRESOLVED -> ARCHITECTURE_CHECKED: settle the final reference."""
        reference = resolution.reference

        if reference.digest:
            # A digest pins exactly one manifest
            resolution.key = reference.inspectable_reference
            resolution.digest = reference.qualified_digest
            resolution.pinned = True
            resolution.state = ResolutionState.ARCHITECTURE_CHECKED
            return

        tag_reference = reference.tag_reference
        raw = self.inspector.inspect(tag_reference, cancel_token=cancel_token)
        manifest = load_manifest(raw, tag_reference)
        descriptors = decode_manifest_list(manifest)

        if not descriptors:
            resolution.key = tag_reference
            resolution.manifest = manifest
            resolution.state = ResolutionState.ARCHITECTURE_CHECKED
            return

        if not resolution.node_architecture:
            raise NodeLookupFailed(
                None,
                f"no node architecture to select a platform of {tag_reference}",
            )

        digest = select_platform_digest(
            descriptors, resolution.node_architecture, reference.repository
        )
        resolution.key = f"{reference.repository}@{digest}"
        resolution.digest = digest
        resolution.state = ResolutionState.ARCHITECTURE_CHECKED

    def _compute_size(
        self,
        resolution: _Resolution,
        cancel_token: Optional[CancellationToken],
    ) -> None:
        """ARCHITECTURE_CHECKED -> SIZED: serve from cache or size the manifest."""
        reference = resolution.reference
        key = resolution.key

        cached = self.cache.get(key)
        if cached is not None:
            resolution.record = cached.with_labels(resolution.container_name, reference.tag)
            resolution.state = ResolutionState.SIZED
            return

        manifest = resolution.manifest
        if manifest is None:
            raw = self.inspector.inspect(key, cancel_token=cancel_token)
            manifest = load_manifest(raw, key)
            if decode_manifest_list(manifest):
                logger.warning(
                    f"{key} is a manifest list, not an image manifest; "
                    f"reported size covers no layers"
                )

        size_bytes = sum_layer_sizes(manifest)
        record = ImageRecord(
            container_name=resolution.container_name,
            repository=reference.repository,
            tag=reference.tag,
            digest=resolution.digest,
            size_bytes=size_bytes,
            size_formatted=format_size(size_bytes),
        )
        stored = self.cache.put(key, record)
        logger.debug(f"Resolved {key}: {record.size_formatted}")

        resolution.record = stored.with_labels(resolution.container_name, reference.tag)
        resolution.state = ResolutionState.SIZED


__all__ = ["ImageResolver", "ResolutionState"]
