"""Bounded in-memory cache with per-entry expiry.

Entries expire ``ttl_seconds`` after they were written. When the cache is full,
expired entries are purged first; if that frees nothing, the oldest-inserted
entry is evicted. A cache built with ``max_size=0`` or ``ttl_seconds=0`` retains
nothing.

Example:
    >>> cache = ExpiringCache[str](ttl_seconds=60, max_size=2)
    >>> cache.set("a", "1")
    >>> cache.get("a")
    '1'
"""

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the clock reading after which it is stale."""

    value: T
    expires_at: float


class ExpiringCache(Generic[T]):
    """Key-value store bounded by entry count and time-to-live.

    Insertion order of the underlying dict decides which entry is "oldest".
    Overwriting a key keeps its original position.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl_seconds: Lifetime of each entry in seconds
            max_size: Maximum number of entries held at once
            clock: Monotonic time source, injectable for tests
        """
        self._entries: dict[str, CacheEntry[T]] = {}
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._clock = clock

    def set(self, key: str, value: T) -> None:
        """Store ``value`` under ``key``, evicting if the cache is full."""
        if self._max_size == 0 or self._ttl == 0:
            return

        if key not in self._entries and len(self._entries) >= self._max_size:
            self._purge_expired()

            if len(self._entries) >= self._max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]

        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl)

    def get(self, key: str) -> T | None:
        """Return the live value for ``key``, or None.

        A stale entry found here is removed.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None

        return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Remove ``key`` regardless of expiry. Returns whether it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        """Number of live entries. Expired entries are purged first."""
        self._purge_expired()
        return len(self._entries)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
