"""Cooperative cancellation shared between a scan and its subprocesses."""

import threading
from typing import Optional

from core.exceptions import ScanCancelled


class CancellationToken:
    """
    Thread-safe flag that a scan sets to stop outstanding work.

    Long-running calls (manifest inspections, kubectl queries) poll the
    token and abort their subprocess once it is set.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None
        self._lock = threading.Lock()

    def cancel(self, reason: str = "scan cancelled") -> None:
        """Set the token; the first reason given is kept."""
        with self._lock:
            if self._reason is None:
                self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or the timeout elapses; returns the flag."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        """
        Raise ScanCancelled if the token is set.

        Raises:
            ScanCancelled: If cancellation was requested
        """
        if self._event.is_set():
            raise ScanCancelled(self._reason or "scan cancelled")
