"""Cache port - Injectable caching abstraction.

The destination search keeps an expiring, size-bounded mirror of past
results. This protocol lets the store depend on the contract instead of a
module-level dictionary, so tests can inject a cache with a fake clock.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/timestamped_cache.py (TimestampedCache)
    """

    def get(self, key: str) -> Optional[T]:
        """Get a value from the cache.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found or expired.
        """
        ...

    def set(self, key: str, value: T) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key.
            value: The value to cache.
        """
        ...

    def clear(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries that were cleared.
        """
        ...

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry.

        Returns:
            True if the key existed and was removed, False otherwise.
        """
        ...

    def size(self) -> int:
        """Return the number of entries in the cache."""
        ...

    def stats(self) -> Dict[str, Any]:
        """Return hit/miss counts and the current size."""
        ...
