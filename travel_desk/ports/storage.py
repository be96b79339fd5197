"""Storage ports - Durable key/value storage and the token cookie."""

from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStoragePort(Protocol):
    """Port for small durable string blobs keyed by name.

    Implementations:
    - adapters/storage/file_storage.py (FileStorage)
    - adapters/storage/memory_storage.py (MemoryStorage)

    Writers treat failures as best-effort: implementations may raise
    OSError and callers decide whether to ignore it.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored text for `key`, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...


class TokenCookiePort(Protocol):
    """Port for the cookie that mirrors the session token.

    Implementation: adapters/cookies/cookie_jar_store.py
    """

    def get(self, name: str) -> Optional[str]:
        """Return the cookie value, or None if absent or expired."""
        ...

    def set(self, name: str, value: str, max_age_seconds: float) -> None:
        """Set a cookie that expires after `max_age_seconds` (0 removes it)."""
        ...

    def remove(self, name: str) -> None:
        """Delete the cookie if present."""
        ...
