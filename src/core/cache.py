"""
In-memory resolution cache.

Memoizes resolved image records by their final reference so repeated
containers across pods are inspected once. Entries live for the duration
of a run; nothing is persisted.
"""

import logging
import threading
from typing import Optional

from core.models import ImageRecord

logger = logging.getLogger(__name__)


class ResolutionCache:
    """
    Thread-safe reference-keyed cache of resolved image records.

    Keys are the final resolved reference: digest-qualified
    ("repo@sha256:...") when a digest is known, otherwise the tag-qualified
    reference. Resolution is a pure function of the key, so a second put for
    an existing key never replaces the stored record.

    The cache is best-effort: two callers that miss on the same key at the
    same time both inspect, and both puts are safe.
    """

    def __init__(self, enabled: bool = True):
        """
        Initialize resolution cache.

        Args:
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.hits = 0
        self.misses = 0
        self._records: dict[str, ImageRecord] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ImageRecord]:
        """
        Retrieve a cached record.

        Args:
            key: Resolved reference

        Returns:
            Cached ImageRecord if present, None otherwise
        """
        with self._lock:
            record = self._records.get(key) if self.enabled else None
            if record is None:
                self.misses += 1
            else:
                self.hits += 1

        if record is None:
            logger.debug(f"Cache miss for {key}")
        else:
            logger.debug(f"Cache hit for {key}")
        return record

    def put(self, key: str, record: ImageRecord) -> ImageRecord:
        """
        Store a record unless one is already cached for the key.

        Args:
            key: Resolved reference
            record: Record to cache

        Returns:
            The record now stored for the key
        """
        if not self.enabled:
            return record

        with self._lock:
            stored = self._records.setdefault(key, record)

        if stored is not record:
            logger.debug(f"Redundant cache write for {key}")
        return stored

    def clear(self) -> int:
        """
        Clear all cached entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._records)
            self._records.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return (self.hits / total) * 100

    def summary(self) -> str:
        """Get cache usage summary."""
        if not self.enabled:
            return "Cache disabled"

        total = self.hits + self.misses
        if total == 0:
            return "No cache activity"

        return f"Cache: {self.hits} hits, {self.misses} misses ({self.hit_rate:.1f}% hit rate)"
