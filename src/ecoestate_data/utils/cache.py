"""
utils/cache.py — Thread-safe in-memory TTL cache.

One TTLCache per resource type, all entries sharing the instance TTL. Expiry
is lazy: an entry past its TTL is removed by the get() that observes it, and
there is no background sweep, so size() may count stale entries.

Usage:
    from ecoestate_data.utils.cache import MISSING, TTLCache

    cache: TTLCache[str | None] = TTLCache("walking distance", ttl=86400)
    cache.set("25496000.0,6673000.0", None)
    value = cache.get("25496000.0,6673000.0")
    if value is MISSING:
        ...  # miss; a cached None is a hit
"""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable
from typing import Generic, Literal, NamedTuple, TypeVar

import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


class _Missing(enum.Enum):
    MISSING = enum.auto()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Literal[_Missing.MISSING] = _Missing.MISSING


class CacheEntry(NamedTuple, Generic[T]):
    value: T
    timestamp: float


class TTLCache(Generic[T]):
    """Dict-based cache with a fixed TTL for every entry."""

    def __init__(
        self,
        name: str,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not name:
            raise ValueError("Cache name cannot be empty.")
        if ttl <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl!r}.")
        self.name = name
        self.ttl = ttl
        self._clock = clock
        self._store: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        log.info("cache_initialized", cache=name, ttl_s=ttl)

    def get(self, key: str) -> T | Literal[_Missing.MISSING]:
        """Return the cached value, or MISSING if absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                log.debug("cache_miss", cache=self.name, key=key)
                return MISSING
            if self._clock() - entry.timestamp > self.ttl:
                del self._store[key]
                log.debug("cache_expired", cache=self.name, key=key)
                return MISSING
            log.debug("cache_hit", cache=self.name, key=key)
            return entry.value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._store[key] = CacheEntry(value, self._clock())
        log.debug("cache_set", cache=self.name, key=key)

    def delete(self, key: str) -> bool:
        with self._lock:
            existed = self._store.pop(key, None) is not None
        if existed:
            log.debug("cache_deleted", cache=self.name, key=key)
        return existed

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
        log.info("cache_cleared", cache=self.name)

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"TTLCache(name={self.name!r}, ttl={self.ttl!r}, size={self.size()})"
