"""Size-bounded, expiring cache mirrored to durable storage.

Every entry remembers when it was fetched. Reads treat entries older than
the TTL as misses; writes evict the oldest entries beyond `max_size` and
then persist the whole map as a single JSON blob:

    {"<key>": {"timestamp": <seconds>, "data": <value>}, ...}

Persistence is best-effort: storage failures are logged and ignored, the
in-memory mirror stays authoritative for the running process.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from ...ports.storage import KeyValueStoragePort

T = TypeVar("T")


@dataclass
class TimestampedCache(Generic[T]):
    """Expiring cache with oldest-first eviction and JSON persistence.

    Values must be JSON-serializable.

    Attributes:
        storage: Durable storage receiving the serialized cache
        storage_key: Key of the blob inside the storage
        ttl_seconds: Entry lifetime (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging
        clock: Time source in seconds, injectable for tests

    Example:
        cache = TimestampedCache(MemoryStorage(), "destinations", ttl_seconds=3600)
        cache.set("paris", [{"id": 1}])
    """

    storage: KeyValueStoragePort
    storage_key: str
    ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"
    clock: Callable[[], float] = time.time

    _store: Dict[str, Tuple[float, Any]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")
        self._store = self._load()

    def _load(self) -> Dict[str, Tuple[float, Any]]:
        try:
            raw = self.storage.get_item(self.storage_key)
        except (OSError, ValueError) as e:
            self._logger.debug("Cache load failed", extra={"error": str(e)})
            return {}

        if not raw:
            return {}

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            self._logger.debug("Cache blob is not valid JSON", extra={"error": str(e)})
            return {}

        if not isinstance(parsed, dict):
            return {}

        loaded: Dict[str, Tuple[float, Any]] = {}
        for key, entry in parsed.items():
            if not isinstance(entry, dict) or "data" not in entry:
                continue
            timestamp = entry.get("timestamp")
            if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
                continue
            loaded[key] = (float(timestamp), entry["data"])

        self._logger.debug("Cache loaded", extra={"entries": len(loaded)})
        return loaded

    def _persist(self) -> None:
        blob = {
            key: {"timestamp": timestamp, "data": value}
            for key, (timestamp, value) in self._store.items()
        }
        try:
            self.storage.set_item(self.storage_key, json.dumps(blob))
        except (OSError, TypeError, ValueError) as e:
            self._logger.debug("Cache persist failed", extra={"error": str(e)})

    def _trim(self) -> None:
        if self.max_size is None or len(self._store) <= self.max_size:
            return

        overflow = len(self._store) - self.max_size
        oldest = sorted(self._store.items(), key=lambda item: item[1][0])[:overflow]
        for key, _ in oldest:
            del self._store[key]
            self._logger.debug(
                "Cache evicted entry",
                extra={"key": key, "reason": "max_size"},
            )

    def get(self, key: str) -> Optional[T]:
        """Get a value from the cache.

        Returns:
            The cached value, or None if not found or expired.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            timestamp, value = entry
            if self.ttl_seconds is not None and self.clock() - timestamp >= self.ttl_seconds:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                self._misses += 1
                return None

            self._hits += 1
            return value

    def set(self, key: str, value: T) -> None:
        """Store a value stamped with the current time, trim and persist."""
        with self._lock:
            self._store[key] = (self.clock(), value)
            self._trim()
            self._persist()
            self._logger.debug("Cache entry set", extra={"key": key})

    def clear(self) -> int:
        """Clear all entries from the cache and the storage.

        Returns:
            Number of entries that were cleared.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._persist()
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry.

        Returns:
            True if the key existed and was removed.
        """
        with self._lock:
            if key in self._store:
                del self._store[key]
                self._persist()
                self._logger.debug("Cache entry invalidated", extra={"key": key})
                return True
            return False

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return hit/miss counts and size."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
            }
