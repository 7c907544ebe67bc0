"""
Configuration dataclasses for scans.

Provides strongly-typed configuration for the report aggregator and the
manifest inspector, replacing loose keyword arguments.
"""

from dataclasses import dataclass
from typing import Optional

from constants import (
    DEFAULT_INSPECTOR_BACKEND,
    DEFAULT_MAX_WORKERS,
    MANIFEST_INSPECT_TIMEOUT,
)


@dataclass
class ScanConfig:
    """
    Scan-wide settings.

    Attributes:
        max_workers: Pods resolved concurrently during namespace/cluster scans
        timeout: Overall scan deadline in seconds (None for no deadline)
        inspection_timeout: Timeout for a single manifest inspection
        inspector_backend: Inspection tool ("auto", "docker", "podman", "skopeo")
    """

    max_workers: int = DEFAULT_MAX_WORKERS
    timeout: Optional[float] = None
    inspection_timeout: float = MANIFEST_INSPECT_TIMEOUT
    inspector_backend: str = DEFAULT_INSPECTOR_BACKEND

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValidationException: If configuration is invalid
        """
        from utils.validation import (
            validate_inspector_backend,
            validate_positive_number,
        )

        validate_positive_number(self.max_workers, "max_workers", min_value=1)
        validate_positive_number(self.inspection_timeout, "inspection_timeout", min_value=1)
        if self.timeout is not None:
            validate_positive_number(self.timeout, "timeout", min_value=1)
        validate_inspector_backend(self.inspector_backend)
