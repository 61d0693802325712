# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Time-bounded response cache.

Expired entries are removed lazily when a lookup finds them, or in bulk when
the owner calls ``cleanup()``. The cache never schedules work of its own.
"""

import logging
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the moment it was stored."""

    value: T
    stored_at: float
    ttl: float

    def is_expired(self, now: float | None = None) -> bool:
        """True once more than ``ttl`` seconds have passed since storage."""
        current = time.monotonic() if now is None else now
        return current > self.stored_at + self.ttl


@dataclass(frozen=True)
class CacheStats:
    """Cache statistics."""

    size: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Hits over total lookups, 0.0 before the first lookup."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["hit_rate"] = self.hit_rate
        return result


class ResponseCache:
    """
    In-memory key/value cache with per-entry TTL and hit/miss accounting.

    Every ``get`` counts exactly one hit or one miss. All operations are
    synchronous and guarded by a threading.Lock, so a lookup or store is
    never observed half-done by an interleaved coroutine or thread.

    Usage:
        cache = ResponseCache(default_ttl=60.0)
        cache.set("GET /docs", payload)
        payload = cache.get("GET /docs")
    """

    def __init__(self, default_ttl: float = DEFAULT_TTL_SECONDS) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired():
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Cache EXPIRED: {key[:80]}")
                return None

            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry."""
        actual_ttl = ttl if ttl is not None else self.default_ttl
        if actual_ttl <= 0:
            raise ValueError("ttl must be positive")
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, stored_at=time.monotonic(), ttl=actual_ttl
            )
        logger.debug(f"Cache SET: {key[:80]} (TTL: {actual_ttl}s)")

    def delete(self, key: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed
        """
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for key in keys:
                del self._entries[key]
        if keys:
            logger.debug(f"Cache INVALIDATE: {len(keys)} entries under '{prefix}'")
        return len(keys)

    def clear(self) -> None:
        """Drop all entries and reset the hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def cleanup(self) -> int:
        """Remove all currently expired entries.

        Returns:
            Number of entries removed
        """
        now = time.monotonic()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Cache CLEANUP: {len(expired)} expired entries removed")
        return len(expired)

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries), hits=self._hits, misses=self._misses
            )

    def __len__(self) -> int:
        """Number of stored entries, expired ones included until removed."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """True if ``key`` holds an unexpired entry. Counts no hit or miss."""
        with self._lock:
            entry = self._entries.get(key) if isinstance(key, str) else None
            return entry is not None and not entry.is_expired()


__all__ = ["DEFAULT_TTL_SECONDS", "CacheEntry", "CacheStats", "ResponseCache"]
