"""Storage adapters - Implementations of the KeyValueStoragePort.

Available implementations:
- FileStorage: one JSON file per key under a directory
- MemoryStorage: process-local dictionary
"""

from .file_storage import FileStorage
from .memory_storage import MemoryStorage

__all__ = ["FileStorage", "MemoryStorage"]
