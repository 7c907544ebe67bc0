"""
Image reference parsing.

Splits an image URI as stored on a container spec into repository, tag and
digest. The parser is total: any string yields an ImageReference, and input
that does not fit the grammar is kept whole as the repository.
"""

from typing import Optional

from constants import DIGEST_PREFIX, TAG_UNSPECIFIED
from core.models import ImageReference


def parse_image_reference(image_uri: str) -> ImageReference:
    """
    Parse a container image URI.

    The digest is anchored on "@" first, so text after "@" never becomes a
    tag. The tag is whatever follows the last ":" before the "@", unless
    that text contains a "/" (then the colon belongs to a registry port).

    Args:
        image_uri: Image reference (e.g., "registry:5000/repo:tag@sha256:abc")

    Returns:
        ImageReference with the parsed components

    Examples:
        >>> parse_image_reference("nginx:1.25")
        ImageReference(repository='nginx', tag='1.25', digest=None)

        >>> parse_image_reference("ghcr.io/org/app@sha256:abc123")
        ImageReference(repository='ghcr.io/org/app', tag='N/A', digest='abc123')

        >>> parse_image_reference("localhost:5000/app")
        ImageReference(repository='localhost:5000/app', tag='N/A', digest=None)
    """
    image = image_uri.strip()
    name = image
    digest = None

    if "@" in image:
        name, _, digest_part = image.partition("@")
        if not digest_part.startswith(DIGEST_PREFIX):
            return ImageReference(repository=image)
        digest = digest_part[len(DIGEST_PREFIX):]
        if not digest:
            return ImageReference(repository=image)

    repository, tag = _split_tag(name)
    if tag == "":
        # Trailing ":" with nothing after it
        return ImageReference(repository=image)

    return ImageReference(
        repository=repository,
        tag=tag if tag is not None else TAG_UNSPECIFIED,
        digest=digest,
    )


def _split_tag(name: str) -> tuple[str, Optional[str]]:
    """Split "repo:tag" on the last colon; a colon inside a path is a port."""
    repository, sep, tag = name.rpartition(":")
    if not sep or "/" in tag:
        return name, None
    return repository, tag


__all__ = ["parse_image_reference"]
