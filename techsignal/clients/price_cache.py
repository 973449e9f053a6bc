"""In-memory TTL cache for price history lookups.

Entries are keyed by (asset_id, days, 5-minute bucket) so that repeated
requests inside the same bucket share one upstream call. Each client owns
its own cache instance.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from techsignal.core.models import PricePoint

logger = logging.getLogger(__name__)

# Width of a cache bucket (seconds)
BUCKET_SECONDS = 300

CacheKey = tuple[str, int, int]


class PriceHistoryCache:
    """Bounded TTL cache of price history results."""

    def __init__(
        self,
        ttl: float = 300.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        # key -> (stored_at, prices)
        self._entries: dict[CacheKey, tuple[float, list[PricePoint]]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl > 0 and self.max_entries > 0

    def __len__(self) -> int:
        return len(self._entries)

    def key(self, asset_id: str, days: int) -> CacheKey:
        """Build the cache key for the current time bucket."""
        return (asset_id, days, int(self._clock() // BUCKET_SECONDS))

    def get(self, asset_id: str, days: int) -> list[PricePoint] | None:
        """Return a fresh cached result, or None."""
        if not self.enabled:
            return None

        key = self.key(asset_id, days)
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, prices = entry
        if self._clock() - stored_at > self.ttl:
            del self._entries[key]
            return None

        logger.debug(f"Price cache hit: {asset_id} ({days}d)")
        return list(prices)

    def set(self, asset_id: str, days: int, prices: list[PricePoint]) -> None:
        """Store a non-empty result."""
        if not self.enabled or not prices:
            return

        self._entries[self.key(asset_id, days)] = (self._clock(), list(prices))
        self._cleanup()

    def clear(self) -> None:
        self._entries.clear()

    def _cleanup(self) -> int:
        """Drop expired entries, then the oldest ones above ``max_entries``.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        removed = 0

        for key in [k for k, (ts, _) in self._entries.items() if now - ts > self.ttl]:
            del self._entries[key]
            removed += 1

        if len(self._entries) > self.max_entries:
            oldest = sorted(self._entries, key=lambda k: self._entries[k][0])
            for key in oldest[: len(self._entries) - self.max_entries]:
                del self._entries[key]
                removed += 1

        if removed > 0:
            logger.debug(f"Cleaned up {removed} stale price history entries")

        return removed
