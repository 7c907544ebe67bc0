"""Utility modules for subprocess execution, inspection and formatting."""

from utils.command import CommandResult, run_command
from utils.docker_utils import DockerManifestInspector
from utils.formatting import format_size

__all__ = [
    "CommandResult",
    "run_command",
    "DockerManifestInspector",
    "format_size",
]
