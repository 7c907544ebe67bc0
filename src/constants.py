"""
Centralized configuration constants for image-sizes.

This module provides a single source of truth for configuration values
that are used across multiple modules, making them easier to update
and maintain.
"""

# ============================================================================
# Image References
# ============================================================================

TAG_UNSPECIFIED = "N/A"
"""Placeholder tag for references that carry no tag (distinct from an empty tag)."""

DIGEST_PREFIX = "sha256:"
"""Digest algorithm prefix recognized in image references."""

# ============================================================================
# Size Formatting
# ============================================================================

KIB = 1024
"""Bytes per kibibyte."""

MIB = 1024 * 1024
"""Bytes per mebibyte."""

GIB = 1024 * 1024 * 1024
"""Bytes per gibibyte."""

# ============================================================================
# Output
# ============================================================================

DEFAULT_OUTPUT_FORMAT = "table"
"""Default report format."""

OUTPUT_FORMATS = ("table", "json", "yaml")
"""Supported report formats."""

DIGEST_UNAVAILABLE = "N/A"
"""Table cell shown for images resolved without a digest."""

# ============================================================================
# Concurrency and Performance
# ============================================================================

DEFAULT_MAX_WORKERS = 4
"""Default number of pods resolved concurrently during a namespace/cluster scan."""

CANCEL_POLL_INTERVAL = 0.2
"""How often (seconds) a running subprocess checks for scan cancellation."""

# ============================================================================
# Manifest Inspection
# ============================================================================

INSPECTOR_BACKENDS = ("auto", "docker", "podman", "skopeo")
"""Manifest inspection backends selectable from the CLI."""

DEFAULT_INSPECTOR_BACKEND = "auto"
"""Default manifest inspection backend (first available tool wins)."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

MANIFEST_INSPECT_TIMEOUT = 60
"""Timeout for a single manifest inspection (1 minute)."""

KUBECTL_TIMEOUT = 30
"""Timeout for kubectl queries (30 seconds)."""

VERSION_CHECK_TIMEOUT = 5
"""Timeout for tool version checks (5 seconds)."""
