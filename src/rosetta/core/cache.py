"""Process-wide memoizing caches.

The interning cache, the classification cache and the ClassReference registry
are all MemoCache instances. Each cache registers itself so reset_caches() can
clear every one of them between independent runs (typically tests).
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable, Hashable
from typing import Generic, NamedTuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_REGISTRY: weakref.WeakSet[MemoCache] = weakref.WeakSet()
_REGISTRY_LOCK = threading.Lock()


class CacheInfo(NamedTuple):
    """Hit/miss statistics of a MemoCache."""

    hits: int
    misses: int
    size: int


class MemoCache(Generic[K, V]):
    """Memoizing map with atomic insert-if-absent semantics.

    Lookups and computations run under a re-entrant lock, so a factory is
    invoked at most once per key and no reader observes a half-written entry.
    A factory that raises leaves the cache untouched.
    """

    def __init__(self, name: str) -> None:
        """Initialize an empty cache and register it for reset_caches().

        Args:
            name: Human-readable cache name used in log messages.
        """
        self.name = name
        self._data: dict[K, V] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        with _REGISTRY_LOCK:
            _REGISTRY.add(self)

    def get_or_compute(self, key: K, factory: Callable[[], V]) -> V:
        """Return the cached value for key, computing it on first use.

        Args:
            key: Cache key.
            factory: Zero-argument callable producing the value.

        Returns:
            The value stored for key (the first one written wins).
        """
        with self._lock:
            if key in self._data:
                self._hits += 1
                return self._data[key]
            self._misses += 1
            value = factory()
            return self._data.setdefault(key, value)

    def put_if_absent(self, key: K, value: V) -> V:
        """Store value unless key is already present.

        Returns:
            The value now associated with key.
        """
        with self._lock:
            return self._data.setdefault(key, value)

    def get(self, key: K) -> V | None:
        """Look up key without computing anything."""
        with self._lock:
            return self._data.get(key)

    def clear(self, before: Callable[[], None] | None = None) -> None:
        """Drop all entries and reset the statistics.

        Args:
            before: Called under the cache lock just before the entries are
                dropped, so no computation can interleave with it.
        """
        with self._lock:
            if before is not None:
                before()
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def info(self) -> CacheInfo:
        """Return hit/miss statistics."""
        with self._lock:
            return CacheInfo(self._hits, self._misses, len(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data


def reset_caches() -> None:
    """Clear every registered cache.

    Must not run concurrently with a resolution that already reads the caches;
    callers serialize it against resolution (e.g. between test runs).
    """
    with _REGISTRY_LOCK:
        caches = list(_REGISTRY)
    for cache in caches:
        cache.clear()
    logger.debug(f"Cleared {len(caches)} caches")
