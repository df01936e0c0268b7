"""In-memory LRU cache for normalized LLM responses."""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from textcraft.config.logging_config import get_logger
from textcraft.llm.types import TextResponse

logger = get_logger(__name__)


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0


class ResponseCache:
    """
    Bounded LRU cache with a fixed TTL from insertion.

    Expiry is lazy: an expired entry is dropped when it is next read. Reads
    refresh recency; inserting past `max_entries` evicts the least recently
    used entry.
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_s: float = 3600.0,
        time_fn: Optional[Callable[[], float]] = None,
    ):
        """Initialize the cache.

        Args:
            max_entries: Maximum number of cached responses
            ttl_s: Entry lifetime in seconds
            time_fn: Clock used for expiry (monotonic by default)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_s <= 0:
            raise ValueError("ttl_s must be positive")

        self.max_entries = max_entries
        self.ttl_s = ttl_s
        self._time = time_fn or time.monotonic

        # key -> (expires_at, response); order is recency, oldest first
        self._entries: "OrderedDict[str, Tuple[float, TextResponse]]" = OrderedDict()
        self._lock = threading.Lock()
        self.stats = CacheStats()

        logger.info(f"📦 Response cache initialized: max_entries={max_entries}, ttl={ttl_s}s")

    def get(self, key: str) -> Optional[TextResponse]:
        """Return the cached response, or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.stats.misses += 1
                logger.debug(f"📦 Cache miss for key: {key[:64]}")
                return None

            expires_at, response = entry
            if self._time() >= expires_at:
                del self._entries[key]
                self.stats.expirations += 1
                self.stats.misses += 1
                logger.debug(f"📦 Cache entry expired for key: {key[:64]}")
                return None

            self._entries.move_to_end(key)
            self.stats.hits += 1
            logger.debug(f"📦 Cache hit for key: {key[:64]}")
            return response

    def set(self, key: str, response: TextResponse) -> None:
        """Insert or replace an entry, evicting the LRU entry when full."""
        with self._lock:
            self._entries[key] = (self._time() + self.ttl_s, response)
            self._entries.move_to_end(key)

            while len(self._entries) > self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self.stats.evictions += 1
                logger.debug(f"📦 Cache evicted LRU key: {evicted_key[:64]}")

    def contains(self, key: str) -> bool:
        """True if `key` is stored, expired or not. Does not touch recency."""
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"📦 Response cache cleared: {count} entries removed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
