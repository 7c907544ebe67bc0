"""
Manifest decoding, architecture resolution and layer size computation.

A registry answers a tag with either a single-architecture image manifest
(which lists layers with sizes) or a manifest list / OCI index (which lists
per-platform manifest digests and never carries layer sizes). These helpers
interpret raw manifest bytes returned by the inspection collaborator.
"""

import json
import logging
from typing import Any, Sequence, Union

from core.exceptions import ManifestDecodeFailed, NoMatchingArchitecture
from core.models import ManifestDescriptor

logger = logging.getLogger(__name__)


def load_manifest(raw: Union[bytes, str], reference: str) -> dict[str, Any]:
    """
    Decode raw manifest bytes into a JSON object.

    Args:
        raw: Manifest bytes from the inspector
        reference: Reference the bytes belong to (for error messages)

    Returns:
        Decoded manifest object

    Raises:
        ManifestDecodeFailed: If the bytes are not a JSON object
    """
    try:
        manifest = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestDecodeFailed(reference, str(e)) from e

    if not isinstance(manifest, dict):
        raise ManifestDecodeFailed(
            reference, f"expected a JSON object, got {type(manifest).__name__}"
        )
    return manifest


def decode_manifest_list(manifest: dict[str, Any]) -> tuple[ManifestDescriptor, ...]:
    """
    Extract platform descriptors from a manifest list.

    Entries without a platform architecture or a digest are skipped. An
    empty result means the manifest is a single-architecture image manifest.

    Args:
        manifest: Decoded manifest object

    Returns:
        Descriptors in list order
    """
    entries = manifest.get("manifests")
    if not isinstance(entries, list):
        return ()

    descriptors = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        platform = entry.get("platform") or {}
        architecture = platform.get("architecture") if isinstance(platform, dict) else None
        digest = entry.get("digest")
        if not architecture or not digest:
            continue
        descriptors.append(
            ManifestDescriptor(
                architecture=architecture,
                digest=digest,
                os=platform.get("os"),
                variant=platform.get("variant"),
            )
        )
    return tuple(descriptors)


def select_platform_digest(
    descriptors: Sequence[ManifestDescriptor],
    architecture: str,
    repository: str,
) -> str:
    """
    Pick the manifest digest for a node architecture.

    The first descriptor whose architecture matches wins; variants are not
    scored and there is no fallback to another architecture.

    Args:
        descriptors: Manifest list entries in list order
        architecture: Node architecture (e.g., "arm64")
        repository: Repository name, for the error message

    Returns:
        Digest of the matching platform manifest

    Raises:
        NoMatchingArchitecture: If no descriptor matches
    """
    for descriptor in descriptors:
        if descriptor.architecture == architecture:
            logger.debug(
                f"Selected {descriptor.digest} for {repository} ({descriptor.platform})"
            )
            return descriptor.digest

    available = []
    for descriptor in descriptors:
        if descriptor.architecture not in available:
            available.append(descriptor.architecture)
    raise NoMatchingArchitecture(repository, architecture, available)


def sum_layer_sizes(manifest: dict[str, Any]) -> int:
    """
    Total the layer sizes of an image manifest.

    Missing "layers", non-object entries and entries without a size count
    as zero; a manifest with no layers has size 0.

    Args:
        manifest: Decoded single-architecture manifest

    Returns:
        Sum of layer sizes in bytes
    """
    layers = manifest.get("layers")
    if not isinstance(layers, list):
        return 0

    total = 0
    for layer in layers:
        if not isinstance(layer, dict):
            continue
        size = layer.get("size")
        if isinstance(size, int) and not isinstance(size, bool):
            total += size
    return total


__all__ = [
    "load_manifest",
    "decode_manifest_list",
    "select_platform_digest",
    "sum_layer_sizes",
]
