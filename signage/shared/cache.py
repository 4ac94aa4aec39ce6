"""
Response Cache Module

In-memory key -> (value, timestamp) cache shared by the API endpoints.

Features:
- Fixed global TTL
- Lazy eviction of stale entries on read
- Wholesale replacement on write
- Single-flight loading for concurrent misses

Data Model:
- CacheEntry: value + timestamp
- Keys: one per endpoint (finite, small)

Notes:
- Not durable, not shared between processes
- No size bound; the key set is fixed by the routes
- The map is guarded by a lock because blocking client calls
  run in worker threads

Author: Signage Development Team
"""

import asyncio
import logging
import threading
import time
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class CacheEntry:
    __slots__ = ("value", "timestamp")

    def __init__(self, value: Any, timestamp: float):
        self.value = value
        self.timestamp = timestamp


class ResponseCache:
    """
    TTL cache with a narrow get/set interface.

    Attributes:
        ttl_seconds: Entry validity window
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, ttl_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._load_locks: Dict[str, asyncio.Lock] = {}

    def get(self, key: str) -> Optional[Any]:
        """
        Return the cached value, or None on a miss.

        An entry older than the TTL counts as a miss and is dropped.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() - entry.timestamp > self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value, self.clock())

    def __len__(self):
        with self._lock:
            return len(self._entries)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value or compute it with loader.

        Concurrent misses on the same key wait for a single load.
        If loader raises, nothing is stored and the error propagates.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        lock = self._load_locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another waiter may have filled it
            cached = self.get(key)
            if cached is not None:
                return cached

            logger.info(f"Cache miss: {key}")
            value = await loader()
            self.set(key, value)
            return value
