"""In-memory key/value storage, used when no storage directory is configured."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class MemoryStorage:
    """Dictionary-backed KeyValueStoragePort; contents die with the process."""

    _items: Dict[str, str] = field(default_factory=dict, repr=False)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
