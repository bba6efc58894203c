"""A size-bounded cache that evicts least recently used items first."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Protocol


class CacheItem(Protocol):
    def size(self) -> int: ...


Predicate = Callable[[CacheItem], bool]


class Cache:
    """Caches items while keeping their cumulated size under ``max_size``.

    A ``max_size`` of 0 disables the cache; a negative one removes the limit.
    """

    def __init__(self, max_size: int = 0) -> None:
        self._max_size = max_size
        self._items: List[CacheItem] = []
        self._size = 0
        self._lock = threading.Lock()

    def get(self, found: Predicate) -> Optional[CacheItem]:
        """Return the first item matching ``found`` and mark it as recently used."""
        with self._lock:
            for idx, item in enumerate(self._items):
                if found(item):
                    del self._items[idx]
                    self._items.append(item)
                    return item
        return None

    def set(self, item: CacheItem) -> None:
        """Store ``item``, evicting the oldest items to make room."""
        if self._max_size == 0:
            return
        size = item.size()
        if self._max_size > 0 and size > self._max_size:
            return
        with self._lock:
            if self._max_size > 0:
                while self._items and self._size + size > self._max_size:
                    self._size -= self._items.pop(0).size()
            self._size += size
            self._items.append(item)

    def delete(self, remove: Predicate) -> None:
        """Remove every item matching ``remove``."""
        with self._lock:
            kept = []
            for item in self._items:
                if remove(item):
                    self._size -= item.size()
                else:
                    kept.append(item)
            self._items = kept