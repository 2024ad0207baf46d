"""
In-process TTL cache for product list responses.

Holds fully computed response payloads keyed by the canonical form of the
list query. Entries expire lazily after the TTL and are dropped wholesale on
every index rebuild, because any mutation can change the membership of any
query.

Each entry also records the index generation it was computed against; an
entry from another generation is treated as absent, so a reader that raced a
rebuild cannot publish a stale answer. The entry count is bounded with
least-recently-used eviction.
"""

import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

# TTL in seconds - short enough that an unmutated catalog still refreshes often
DEFAULT_CACHE_TTL_SECONDS = 30.0
DEFAULT_CACHE_MAX_ENTRIES = 1000


def make_cache_key(params: Dict[str, Any]) -> Hashable:
    """
    Create a deterministic cache key for a list query.

    Keys are serialized with sorted keys, so parameter order never matters
    and semantically different parameter sets never collide.

    Args:
        params: Wire-named query parameters (page, limit, search, category, sortBy, sortOrder)

    Returns:
        Canonical JSON string
    """
    return json.dumps(params, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass
class CacheEntry:
    payload: Dict[str, Any]
    headers: Dict[str, str]
    expires_at: float
    generation: int


class ResponseCache:
    """Thread-safe TTL + LRU cache of list responses."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable, generation: int) -> Optional[CacheEntry]:
        """
        Retrieve an entry if it exists, has not expired and belongs to generation.

        Expired or foreign-generation entries are removed on the way out.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= now or entry.generation != generation:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry

    def put(self, key: Hashable, payload: Dict[str, Any], headers: Dict[str, str], generation: int) -> None:
        """Store a computed response, evicting the least recently used entry when full."""
        entry = CacheEntry(
            payload=payload,
            headers=dict(headers),
            expires_at=self._clock() + self.ttl_seconds,
            generation=generation,
        )
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every entry regardless of TTL."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
