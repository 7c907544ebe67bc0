"""
Error classification for operator diagnostics.

Categorizes resolution failures so a scan summary can tell "image not
found" apart from "architecture mismatch" or "malformed manifest". The
classification is informational only; nothing is retried.
"""

from enum import Enum
from dataclasses import dataclass
import re

from core.exceptions import (
    ClusterQueryFailed,
    InvalidImageReference,
    ManifestDecodeFailed,
    ManifestInspectionFailed,
    NoMatchingArchitecture,
    NodeLookupFailed,
    PodReportFailed,
    ScanCancelled,
)


class ErrorCategory(str, Enum):
    """
    Categories of per-pod failures.
    """
    NOT_FOUND = "not_found"
    """Image or tag does not exist in the registry"""

    AUTH = "auth"
    """Registry refused the request (credentials missing or invalid)"""

    RATE_LIMIT = "rate_limit"
    """Registry rate limited the request"""

    NETWORK = "network"
    """DNS, connection or timeout problems reaching the registry"""

    ARCHITECTURE_MISMATCH = "architecture_mismatch"
    """Manifest list has no entry for the node's architecture"""

    MALFORMED_MANIFEST = "malformed_manifest"
    """Manifest could not be decoded"""

    NODE_LOOKUP = "node_lookup"
    """Node architecture could not be determined"""

    INVALID_REFERENCE = "invalid_reference"
    """Container image reference is empty"""

    CANCELLED = "cancelled"
    """Scan was cancelled while the pod was in progress"""

    UNKNOWN = "unknown"
    """Unrecognized error"""


@dataclass(frozen=True)
class ClassifiedError:
    """
    An error with its classification.
    """
    category: ErrorCategory
    original_message: str


class ErrorClassifier:
    """
    Classifies resolution errors into categories.
    """

    # Authentication patterns
    AUTH_PATTERNS = [
        r"401",
        r"403",
        r"unauthorized",
        r"forbidden",
        r"denied",
        r"authentication required",
        r"no basic auth credentials",
        r"not authorized",
    ]

    # Rate limit patterns
    RATE_LIMIT_PATTERNS = [
        r"toomanyrequests",
        r"rate limit",
        r"too many requests",
        r"429",
    ]

    # Not found patterns
    NOT_FOUND_PATTERNS = [
        r"not found",
        r"manifest unknown",
        r"does not exist",
        r"no such manifest",
        r"404",
    ]

    # DNS, connection and timeout patterns
    NETWORK_PATTERNS = [
        r"no such host",
        r"could not resolve host",
        r"timeout",
        r"timed out",
        r"connection refused",
        r"connection reset",
        r"network is unreachable",
    ]

    @classmethod
    def classify(cls, error: Exception) -> ClassifiedError:
        """
        Classify an error by type first, then by diagnostic text.

        Args:
            error: Resolution error, possibly wrapped in PodReportFailed

        Returns:
            ClassifiedError with category
        """
        cause = error.cause if isinstance(error, PodReportFailed) else error
        message = str(cause)

        if isinstance(cause, NoMatchingArchitecture):
            return ClassifiedError(ErrorCategory.ARCHITECTURE_MISMATCH, message)
        if isinstance(cause, ManifestDecodeFailed):
            return ClassifiedError(ErrorCategory.MALFORMED_MANIFEST, message)
        if isinstance(cause, NodeLookupFailed):
            return ClassifiedError(ErrorCategory.NODE_LOOKUP, message)
        if isinstance(cause, InvalidImageReference):
            return ClassifiedError(ErrorCategory.INVALID_REFERENCE, message)
        if isinstance(cause, ScanCancelled):
            return ClassifiedError(ErrorCategory.CANCELLED, message)

        if isinstance(cause, ManifestInspectionFailed):
            text = cause.diagnostic
        elif isinstance(cause, ClusterQueryFailed):
            text = cause.reason
        else:
            text = message

        return ClassifiedError(cls.classify_diagnostic(text), message)

    @classmethod
    def classify_diagnostic(cls, diagnostic: str) -> ErrorCategory:
        """
        Classify raw diagnostic text from an inspection tool.

        Args:
            diagnostic: stderr/stdout text of the failed command

        Returns:
            Matching ErrorCategory, UNKNOWN if nothing matches
        """
        text = diagnostic.lower()

        # Check authentication errors first; registries often answer
        # unauthorized requests for private images with "not found"
        if any(re.search(pattern, text) for pattern in cls.AUTH_PATTERNS):
            return ErrorCategory.AUTH

        if any(re.search(pattern, text) for pattern in cls.RATE_LIMIT_PATTERNS):
            return ErrorCategory.RATE_LIMIT

        if any(re.search(pattern, text) for pattern in cls.NOT_FOUND_PATTERNS):
            return ErrorCategory.NOT_FOUND

        if any(re.search(pattern, text) for pattern in cls.NETWORK_PATTERNS):
            return ErrorCategory.NETWORK

        return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ClassifiedError",
    "ErrorClassifier",
]
