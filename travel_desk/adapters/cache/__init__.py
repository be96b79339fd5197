"""Cache adapters - Implementations of the CachePort.

Available implementations:
- TimestampedCache: expiring, size-bounded cache persisted to storage
"""

from .timestamped_cache import TimestampedCache

__all__ = ["TimestampedCache"]
