"""Thread-safe least-recently-used cache with hit/miss accounting."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Mapping, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CAPACITY = 128


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of hit, miss and eviction totals."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0


class LRUCache(Generic[K, V]):
    """A capacity-limited cache that evicts the least recently used entry."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            capacity = DEFAULT_CAPACITY
        self.capacity = capacity
        self._items: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: K, default: Any = None) -> Any:
        """Return the value for key and mark it recently used, or default."""
        with self._lock:
            try:
                value = self._items[key]
            except KeyError:
                self._misses += 1
                return default
            self._items.move_to_end(key)
            self._hits += 1
            return value

    def set(self, key: K, value: V) -> None:
        """Store a value, evicting the least recently used entry if full."""
        with self._lock:
            if key in self._items:
                self._items[key] = value
                self._items.move_to_end(key)
                return
            self._items[key] = value
            if len(self._items) > self.capacity:
                self._items.popitem(last=False)
                self._evictions += 1

    def delete(self, key: K) -> None:
        """Remove key if present."""
        with self._lock:
            self._items.pop(key, None)

    def warm(self, entries: Mapping[K, V]) -> None:
        """Insert every entry of the mapping."""
        for key, value in entries.items():
            self.set(key, value)

    def invalidate(self, predicate: Callable[[K, V], bool]) -> None:
        """Remove every entry for which predicate(key, value) is true."""
        with self._lock:
            doomed = [k for k, v in self._items.items() if predicate(k, v)]
            for key in doomed:
                del self._items[key]

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""
        with self._lock:
            return CacheStats(self._hits, self._misses, self._evictions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items