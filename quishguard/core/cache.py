"""Bounded TTL cache for composite analysis reports."""
import hashlib
import time
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from quishguard.models import CompositeReport
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    key: str
    value: CompositeReport
    created_at: float


class ResultCache:
    """
    Thread-safe cache of composite reports keyed by the exact URL string.

    Entries expire ``ttl`` seconds after insertion and are dropped lazily when
    looked up. When full, the oldest inserted entry is evicted; reads do not
    refresh an entry's position.
    """

    def __init__(self, max_size: int = 100, ttl: float = 3600,
                 clock: Callable[[], float] = time.time):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries
            ttl: Time-to-live in seconds
            clock: Time source, seconds since epoch
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0

        logger.info(f"ResultCache initialized: max_size={max_size}, ttl={ttl}s")

    @staticmethod
    def make_key(url: str) -> str:
        """SHA256 of the full URL, query string included."""
        return hashlib.sha256(url.encode('utf-8')).hexdigest()

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at >= self.ttl

    def get(self, url: str) -> Optional[CompositeReport]:
        """
        Get a live cached report.

        Args:
            url: URL to look up

        Returns:
            Cached report, or None if absent or expired
        """
        key = self.make_key(url)

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                logger.debug(f"Cache MISS for URL: {url[:50]}...")
                return None

            if self._is_expired(entry):
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Cache expired for URL: {url[:50]}...")
                return None

            self._hits += 1
            logger.debug(f"Cache HIT for URL: {url[:50]}...")
            return entry.value

    def put(self, url: str, value: CompositeReport) -> None:
        """
        Store a report.

        Args:
            url: URL key
            value: Report to cache
        """
        key = self.make_key(url)

        with self._lock:
            # a re-put counts as a fresh insertion
            self._entries.pop(key, None)

            if len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
                logger.debug("Cache full - evicted oldest entry")

            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())
            logger.debug(f"Cache SET for URL: {url[:50]}...")

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            logger.info("Cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0

            return {
                'size': len(self._entries),
                'max_size': self.max_size,
                'ttl': self.ttl,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': round(hit_rate, 2)
            }
