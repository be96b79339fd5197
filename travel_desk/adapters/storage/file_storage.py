"""File-backed key/value storage.

Each key is stored as `<directory>/<key>.json`. Writes go through a
temporary file and a rename so a crash never leaves a half-written blob.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class FileStorage:
    """KeyValueStoragePort persisted under a directory.

    Attributes:
        directory: Directory holding one file per key (created on first write)
    """

    directory: Path
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)
        self._logger = logging.getLogger(__name__)

    def _path_for(self, key: str) -> Path:
        safe_key = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self.directory / f"{safe_key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)
        self._logger.debug(
            "Storage item written",
            extra={"key": key, "path": str(path), "bytes": len(value)},
        )
