import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """Thread-safe in-memory TTL cache with automatic expiration."""

    def __init__(self, default_ttl_seconds: int = 3600, clock: Callable[[], float] = time.time):
        """
        Initialize TTL cache.

        Args:
            default_ttl_seconds: Default TTL in seconds for cache entries
            clock: Time source in seconds (tests pass a fake clock)
        """
        self.default_ttl = default_ttl_seconds
        self._clock = clock
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if found and not expired, None otherwise
        """
        with self._lock:
            if key not in self._cache:
                return None

            value, expiry_time = self._cache[key]

            if self._clock() > expiry_time:
                del self._cache[key]
                return None

            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: TTL in seconds (uses default if None)
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        with self._lock:
            self._cache[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if key was deleted, False if key didn't exist
        """
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self) -> int:
        """
        Remove expired entries from cache.

        Returns:
            Number of expired entries removed
        """
        with self._lock:
            now = self._clock()
            expired_keys = [key for key, (_, expiry_time) in self._cache.items() if now > expiry_time]
            for key in expired_keys:
                del self._cache[key]
            return len(expired_keys)

    def size(self) -> int:
        """Get current number of cache entries."""
        with self._lock:
            return len(self._cache)
