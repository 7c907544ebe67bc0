"""Subprocess utilities with timeout and cancellation support."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from constants import CANCEL_POLL_INTERVAL
from core.cancellation import CancellationToken
from core.exceptions import ScanCancelled

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution."""
    returncode: int
    stdout: bytes
    stderr: bytes
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """Check if command was successful."""
        return self.returncode == 0 and not self.timed_out

    @property
    def diagnostic(self) -> str:
        """Error text for operators: stderr, or stdout when stderr is empty."""
        text = self.stderr or self.stdout
        return text.decode("utf-8", errors="replace").strip()


def run_command(
    cmd: list[str],
    timeout: Optional[float] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> CommandResult:
    """
    Run a command, capturing raw stdout and stderr.

    The process is killed when the timeout elapses or the cancel token is
    set. A missing executable is reported as exit code 127, one that cannot
    be started otherwise as 126.

    Args:
        cmd: Command and arguments
        timeout: Timeout in seconds (None for no timeout)
        cancel_token: Token polled while the command runs

    Returns:
        CommandResult with stdout, stderr, and return code

    Raises:
        ScanCancelled: If the cancel token was set before or during the run
    """
    if cancel_token is not None:
        cancel_token.raise_if_cancelled()

    logger.debug(f"Running command: {cmd}")

    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        logger.debug(f"Cannot execute {cmd[0]}: {e}")
        returncode = 127 if isinstance(e, FileNotFoundError) else 126
        return CommandResult(returncode=returncode, stdout=b"", stderr=str(e).encode())

    waited = 0.0
    while True:
        if cancel_token is None:
            wait_for = timeout
        elif timeout is None:
            wait_for = CANCEL_POLL_INTERVAL
        else:
            wait_for = min(CANCEL_POLL_INTERVAL, max(timeout - waited, 0.0))

        try:
            stdout, stderr = proc.communicate(timeout=wait_for)
            return CommandResult(returncode=proc.returncode, stdout=stdout, stderr=stderr)
        except subprocess.TimeoutExpired:
            waited += wait_for or 0.0

        if cancel_token is not None and cancel_token.cancelled:
            _kill(proc)
            raise ScanCancelled(cancel_token.reason or "scan cancelled")

        if timeout is not None and waited >= timeout:
            _kill(proc)
            logger.warning(f"Command timed out after {timeout}s: {cmd}")
            return CommandResult(
                returncode=-1,
                stdout=b"",
                stderr=f"Command timed out after {timeout} seconds".encode(),
                timed_out=True,
            )


def _kill(proc: subprocess.Popen) -> None:
    """Kill a running process and reap it."""
    proc.kill()
    proc.communicate()
