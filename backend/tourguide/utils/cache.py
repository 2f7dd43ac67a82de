"""In-memory LRU cache with TTL expiration.

Process-level cache for standardized addresses. Entries are evicted when
the cache is full (least recently read first) and expire a fixed time
after insertion, regardless of how often they are read.
Defaults: 50 entries, 5 minute TTL.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from tourguide.config import DEFAULT_EXPIRATION_SECONDS, DEFAULT_MAX_SIZE
from tourguide.models import InvalidConfigurationError

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """A cached value with its insertion and last-read times."""

    value: V
    raw_data: Any
    created_at: float
    last_accessed_at: float


class BoundedCache(Generic[V]):
    """TTL-aware LRU cache.

    The underlying ``OrderedDict`` is kept in access order: the first item
    is always the next eviction candidate. All operations hold an internal
    lock so the background sweep can run alongside foreground reads.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        expiration_seconds: float = DEFAULT_EXPIRATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
            raise InvalidConfigurationError(
                f"max_size must be a positive integer, got {max_size!r}"
            )
        if expiration_seconds < 0:
            raise InvalidConfigurationError(
                f"expiration_seconds must be >= 0, got {expiration_seconds!r}"
            )
        self._cache: OrderedDict[str, CacheEntry[V]] = OrderedDict()
        self._max_size = max_size
        self._expiration = float(expiration_seconds)
        self._clock = clock
        self._lock = threading.RLock()

    def _is_expired(self, entry: CacheEntry[V], now: float) -> bool:
        # A zero TTL expires every entry on its next read.
        if self._expiration == 0:
            return True
        return now - entry.created_at > self._expiration

    def get(self, key: str) -> Optional[V]:
        """Return the cached value, or None when missing or expired.

        Expired entries are removed as a side effect. A hit moves the entry
        to the most-recently-used end.
        """
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry[V]]:
        """Like :meth:`get` but returns the whole entry (raw data included).

        Distinguishes a cached None value from a missing key.
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            now = self._clock()
            if self._is_expired(entry, now):
                del self._cache[key]
                return None
            entry.last_accessed_at = now
            self._cache.move_to_end(key)
            return entry

    def set(self, key: str, value: V, raw_data: Any = None) -> None:
        """Insert or overwrite ``key``.

        A new key inserted while full evicts the least recently used entry
        first. Both timestamps are refreshed on every insertion.
        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]
            elif len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
            now = self._clock()
            self._cache[key] = CacheEntry(
                value=value,
                raw_data=raw_data,
                created_at=now,
                last_accessed_at=now,
            )

    def has(self, key: str) -> bool:
        """Existence probe that leaves recency order untouched."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            return not self._is_expired(entry, self._clock())

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clean_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, entry in self._cache.items() if self._is_expired(entry, now)
            ]
            for key in expired_keys:
                del self._cache[key]
            return len(expired_keys)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._cache.keys())

    @property
    def size(self) -> int:
        return len(self._cache)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def expiration_seconds(self) -> float:
        return self._expiration

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}/{self._max_size}, "
            f"expiration={self._expiration}s)"
        )
