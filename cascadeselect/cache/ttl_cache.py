"""
cache/ttl_cache.py - Time-bounded option cache

Stores resolved option lists by key with the time they were written.
Freshness is judged lazily on read; stale entries stay resident so they
can serve as a fallback when a later fetch fails.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..core.constants import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger("cascade.cache")


@dataclass(frozen=True)
class CacheEntry:
    """Option list cached under a key, with its write time."""

    data: List[Any]
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp


class TTLCache:
    """
    Key -> (data, timestamp) store with expiry checked on read.

    There is no background sweep. Entries leave the cache only through
    evict()/evict_all() or by being overwritten under the same key.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Freshness window for entries (5 minutes)
            clock: Time source returning seconds, defaults to time.time
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.time
        self._entries: Dict[str, CacheEntry] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "stale_fallbacks": 0,
            "writes": 0,
            "evictions": 0,
        }

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key, fresh or stale, or None."""
        return self._entries.get(key)

    def put(self, key: str, data: List[Any]) -> CacheEntry:
        """Store data under key stamped with the current time, replacing any prior entry."""
        entry = CacheEntry(data=list(data), timestamp=self.now())
        self._entries[key] = entry
        self._stats["writes"] += 1
        logger.debug(f"Cached {len(entry.data)} options: {key}")
        return entry

    def is_fresh(
        self,
        entry: CacheEntry,
        now: Optional[float] = None,
        ttl: Optional[float] = None,
    ) -> bool:
        """True while the entry is younger than the TTL."""
        if now is None:
            now = self.now()
        if ttl is None:
            ttl = self.ttl_seconds
        return now - entry.timestamp < ttl

    def get_fresh(self, key: str) -> Optional[CacheEntry]:
        """Return the entry only if it is still fresh, counting hits and misses."""
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry):
            self._stats["hits"] += 1
            logger.debug(f"Cache hit: {key}")
            return entry

        self._stats["misses"] += 1
        if entry is None:
            logger.debug(f"Cache miss: {key}")
        else:
            logger.debug(f"Cache entry stale: {key}")
        return None

    def record_fallback(self, key: str) -> None:
        """Count a stale entry served because a fetch failed."""
        self._stats["stale_fallbacks"] += 1
        logger.debug(f"Stale fallback served: {key}")

    def evict(self, key: str) -> bool:
        """Remove one entry. Returns False if the key was absent."""
        if self._entries.pop(key, None) is None:
            return False
        self._stats["evictions"] += 1
        logger.debug(f"Evicted: {key}")
        return True

    def evict_all(self) -> int:
        """Remove every entry. Returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        self._stats["evictions"] += count
        if count:
            logger.info(f"Cleared {count} cache entries")
        return count

    def clear(self, key: Optional[str] = None) -> None:
        """Evict one key, or everything when no key is given."""
        if key:
            self.evict(key)
        else:
            self.evict_all()

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, stale_fallbacks, writes, evictions,
            entries and hit_rate
        """
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / total if total > 0 else 0.0

        return {
            **self._stats,
            "entries": len(self._entries),
            "hit_rate": round(hit_rate, 3),
        }
