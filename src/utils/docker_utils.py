"""
Manifest inspection through container tooling.

Provides a unified interface for reading raw registry manifests, supporting
docker, podman and skopeo automatically.
"""

import logging
import subprocess
import threading
from typing import Optional

from constants import (
    DEFAULT_INSPECTOR_BACKEND,
    MANIFEST_INSPECT_TIMEOUT,
    VERSION_CHECK_TIMEOUT,
)
from core.cancellation import CancellationToken
from core.exceptions import ConfigurationException, ManifestInspectionFailed
from core.interfaces import ManifestInspector
from utils.command import run_command

logger = logging.getLogger(__name__)

# Detection order for the "auto" backend
_BACKEND_ORDER = ["docker", "podman", "skopeo"]


class DockerManifestInspector(ManifestInspector):
    """
    Manifest inspector backed by docker, podman or skopeo.

    Automatically detects an available tool (or uses the one requested) and
    runs one subprocess per inspection. The raw manifest is returned as
    printed by the tool: a manifest list for multi-architecture tags, an
    image manifest otherwise.
    """

    def __init__(
        self,
        backend: str = DEFAULT_INSPECTOR_BACKEND,
        timeout: float = MANIFEST_INSPECT_TIMEOUT,
    ):
        """
        Initialize inspector and detect the backend tool.

        Args:
            backend: "auto", "docker", "podman" or "skopeo"
            timeout: Timeout in seconds for a single inspection

        Raises:
            ConfigurationException: If no usable tool is found
        """
        self.timeout = timeout
        self.runtime = self._detect_runtime(backend)
        if not self.runtime:
            if backend == "auto":
                raise ConfigurationException(
                    "Neither docker, podman nor skopeo found in PATH"
                )
            raise ConfigurationException(f"{backend} not found in PATH")
        logger.debug(f"Using manifest inspector: {self.runtime}")

        self._count_lock = threading.Lock()
        self._inspection_count = 0

    def _detect_runtime(self, backend: str) -> Optional[str]:
        """Detect available inspection tool."""
        candidates = _BACKEND_ORDER if backend == "auto" else [backend]
        for cmd in candidates:
            try:
                result = subprocess.run(
                    [cmd, "--version"],
                    capture_output=True,
                    timeout=VERSION_CHECK_TIMEOUT,
                )
                if result.returncode == 0:
                    return cmd
            except (subprocess.TimeoutExpired, OSError):
                continue
        return None

    def name(self) -> str:
        return self.runtime

    @property
    def inspection_count(self) -> int:
        """Number of inspections attempted so far."""
        with self._count_lock:
            return self._inspection_count

    def _build_command(self, reference: str) -> list[str]:
        """Build the inspection command for the detected tool."""
        if self.runtime == "skopeo":
            return ["skopeo", "inspect", "--raw", f"docker://{reference}"]
        return [self.runtime, "manifest", "inspect", reference]

    def inspect(
        self,
        reference: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> bytes:
        """
        Fetch the raw manifest for a reference.

        Args:
            reference: Fully qualified reference ("repo:tag" or "repo@sha256:...")
            cancel_token: Token that kills the subprocess when set

        Returns:
            Raw manifest bytes

        Raises:
            ManifestInspectionFailed: If the tool exits non-zero or times out
            ScanCancelled: If the inspection was cancelled
        """
        with self._count_lock:
            self._inspection_count += 1

        logger.debug(f"Inspecting manifest for {reference}")
        result = run_command(
            self._build_command(reference),
            timeout=self.timeout,
            cancel_token=cancel_token,
        )

        if not result.success:
            raise ManifestInspectionFailed(reference, result.diagnostic)

        return result.stdout


__all__ = ["DockerManifestInspector"]
