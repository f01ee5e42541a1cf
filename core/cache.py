"""Least-recently-added cache for archive lookups."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cache entry with insertion metadata."""

    key: str
    value: str
    inserted_at: float
    generation: int

    def is_expired(self, now: float, ttl: float) -> bool:
        """Check if entry has reached its age ceiling."""
        return now - self.inserted_at >= ttl


class LRACache:
    """Bounded TTL cache that evicts the least-recently-added entry.

    Entries are ordered by the time they were set, not by the time they were
    read. Each ``set`` appends an insertion record ``(key, generation)`` to a
    FIFO queue. When a key is set again its old record stays in the queue as
    a ghost; eviction recognizes ghosts because their generation no longer
    matches the live entry and discards them without touching the table.

    Expiry is lazy: ``lookup`` drops an entry once it is ``ttl`` seconds old.
    No background sweeping is done.
    """

    def __init__(
        self,
        capacity: int = 1024 * 32,
        ttl: float = 60 * 60,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity < 1:
            raise ValueError("Cache capacity must be at least 1")
        if ttl <= 0:
            raise ValueError("Cache ttl must be positive")
        self.capacity = capacity
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._order: Deque[Tuple[str, int]] = deque()
        self._generation = 0
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._expirations = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def lookup(self, key: str) -> Optional[str]:
        """Return the cached value for ``key`` or ``None`` if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock(), self.ttl):
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, evicting the oldest entries if full."""
        with self._lock:
            now = self._clock()
            if key not in self._entries:
                while len(self._entries) >= self.capacity:
                    self._evict_oldest()

            self._generation += 1
            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                inserted_at=now,
                generation=self._generation,
            )
            self._order.append((key, self._generation))

            if len(self._order) > 2 * self.capacity:
                self._compact()

    def dump(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot every resident entry, expired or not, without mutating state."""
        with self._lock:
            return {
                key: {"value": entry.value, "inserted_at": entry.inserted_at}
                for key, entry in self._entries.items()
            }

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "type": "lra",
                "capacity": self.capacity,
                "ttl": self.ttl,
                "entries": len(self._entries),
                "pending_records": len(self._order),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups > 0 else 0,
                "expirations": self._expirations,
                "evictions": self._evictions,
            }

    def _evict_oldest(self) -> None:
        key, generation = self._order.popleft()
        entry = self._entries.get(key)
        if entry is not None and entry.generation == generation:
            del self._entries[key]
            self._evictions += 1
            logger.debug("cache_evicted", key=key)

    def _compact(self) -> None:
        """Drop ghost records, keeping live records in insertion order."""
        before = len(self._order)
        live = {key: entry.generation for key, entry in self._entries.items()}
        self._order = deque(
            (key, generation)
            for key, generation in self._order
            if live.get(key) == generation
        )
        logger.debug("cache_compacted", dropped=before - len(self._order))
