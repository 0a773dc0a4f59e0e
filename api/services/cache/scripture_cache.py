"""
Scripture Cache

In-memory store of resolved scripture keyed by ScriptureReference.
References compare by passage identity, so "Jn 3:16" and "John 3:16"
share an entry.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Generic, Optional, TypeVar

from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

V = TypeVar("V")


class ScriptureCache(Generic[V]):
    """
    Caches resolved scripture per reference.

    Many concurrent readers, one writer at a time for the whole map. Last
    writer for a key wins. With max_entries=None (the default) the cache
    lives for the process with no eviction; with a bound, the least recently
    used entry is dropped.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: "OrderedDict[Any, V]" = OrderedDict()
        self._lock = ReadWriteLock()
        self.max_entries = max_entries
        self._hits = 0
        self._misses = 0
        # Readers share the read lock, so counters need their own
        self._stats_lock = threading.Lock()

    def get(self, ref) -> Optional[V]:
        """Return the cached value, or None on a miss. Never fetches."""
        if self.max_entries is None:
            with self._lock.read():
                value = self._entries.get(ref)
        else:
            # LRU bookkeeping reorders the map, so it needs exclusive access
            with self._lock.write():
                value = self._entries.get(ref)
                if value is not None:
                    self._entries.move_to_end(ref)

        with self._stats_lock:
            if value is None:
                self._misses += 1
            else:
                self._hits += 1

        if value is None:
            return None
        logger.debug(f"Scripture cache hit for {ref}")
        return value

    def store(self, ref, value: V) -> None:
        """Insert or replace the value for ref."""
        with self._lock.write():
            self._entries[ref] = value
            self._entries.move_to_end(ref)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug(f"Evicted {evicted} from scripture cache")

    def __contains__(self, ref) -> bool:
        with self._lock.read():
            return ref in self._entries

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def clear(self) -> int:
        """Drop every entry; returns how many were removed."""
        with self._lock.write():
            count = len(self._entries)
            self._entries.clear()
        if count:
            logger.info(f"Cleared {count} scripture cache entries")
        return count

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._stats_lock:
            hits, misses = self._hits, self._misses
        return {
            "entries": len(self),
            "max_entries": self.max_entries,
            "hits": hits,
            "misses": misses,
        }
