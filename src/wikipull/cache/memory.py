"""In-process LRU + TTL cache for rendered pages."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 300.0
DEFAULT_CLEANUP_INTERVAL = 60.0

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """A stored value with its bookkeeping timestamps (clock seconds)."""

    key: Hashable
    value: V
    inserted_at: float
    last_accessed_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class BoundedCache(Generic[V]):
    """
    Capacity- and time-bounded cache.

    Features:
    - LRU eviction by last access: a hit moves the key to most-recent
    - Per-entry TTL (default or per call), expired lazily on access
    - Opportunistic sweep of expired entries during set, rate-limited
    - One lock guards entries and LRU order together

    Example:
        cache = BoundedCache(max_size=100, ttl=300)
        cache.set(key, output)
        output = cache.get(key)  # None when absent or expired
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: float = DEFAULT_TTL_SECONDS,
        cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries
            ttl: Default lifetime of an entry in seconds
            cleanup_interval: Minimum seconds between sweeps (0 = every set)
            clock: Time source in seconds (injectable for tests)
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")

        self.max_size = max_size
        self.ttl = ttl
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry[V]] = OrderedDict()
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def _purge_expired_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._last_cleanup = now
        return len(expired)

    def get(self, key: Hashable) -> Optional[V]:
        """Return the value, or None when absent or expired (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            now = self._clock()
            if entry.is_expired(now):
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            entry.last_accessed_at = now
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: Hashable, value: V, ttl: Optional[float] = None) -> None:
        """
        Store a value, resetting its TTL and LRU position if already present.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime in seconds (defaults to the cache TTL)
        """
        lifetime = self.ttl if ttl is None else ttl
        with self._lock:
            now = self._clock()
            if now - self._last_cleanup >= self.cleanup_interval:
                purged = self._purge_expired_locked(now)
                if purged:
                    logger.debug(f"Cache sweep removed {purged} expired entries")

            self._entries.pop(key, None)
            if len(self._entries) >= self.max_size:
                self._purge_expired_locked(now)
            while len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache evicted least recently used entry: {evicted}")

            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                inserted_at=now,
                last_accessed_at=now,
                expires_at=now + lifetime,
            )

    def has(self, key: Hashable) -> bool:
        """True if a live entry exists. Does not count as an access."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return False
            return True

    def delete(self, key: Hashable) -> bool:
        """Remove an entry; True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry now; returns the number removed."""
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def keys(self) -> list[Hashable]:
        """Keys in LRU order, least recently used first (expired ones included until purged)."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)

    def get_stats(self, enabled: bool = True) -> dict[str, Any]:
        """Observability snapshot: {enabled, current_size, max_size, ttl}."""
        return {
            "enabled": enabled,
            "current_size": len(self),
            "max_size": self.max_size,
            "ttl": self.ttl,
        }
