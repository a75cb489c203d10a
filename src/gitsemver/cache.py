"""In-process memoization of calculated versions.

Results are a pure function of (commit, effective configuration) for a
given snapshot, so entries never expire; a cache simply lives as long as the
calculator (or caller) that owns it. Safe to share between threads.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitsemver.calculation.models import VersionResult
    from gitsemver.resolver import EffectiveConfiguration

CacheKey = tuple[str, "EffectiveConfiguration"]


@dataclass
class CacheStats:
    """Statistics about the cache."""

    entries: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups served from the cache."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class VersionCache:
    """Thread-safe mapping of (sha, configuration) to calculation results."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._entries: dict[CacheKey, VersionResult] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def get(self, sha: str, configuration: EffectiveConfiguration) -> VersionResult | None:
        """Get a cached result.

        Args:
            sha: Commit the version was calculated for.
            configuration: Effective configuration used.

        Returns:
            The cached result, or None on a miss or when disabled.
        """
        if not self.enabled:
            return None
        with self._lock:
            result = self._entries.get((sha, configuration))
            if result is None:
                self._misses += 1
            else:
                self._hits += 1
            return result

    def set(self, sha: str, configuration: EffectiveConfiguration, result: VersionResult) -> None:
        """Store a result (no-op when disabled)."""
        if not self.enabled:
            return
        with self._lock:
            self._entries[(sha, configuration)] = result

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> CacheStats:
        """Get a snapshot of cache statistics."""
        with self._lock:
            return CacheStats(entries=len(self._entries), hits=self._hits, misses=self._misses)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
