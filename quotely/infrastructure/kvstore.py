"""
Persistent string-keyed JSON store, the on-disk stand-in for browser storage.

The whole store is one JSON object in one file. Every read goes to disk, so
two processes pointed at the same file see each other's writes; every write
rewrites the file through a temp file and os.replace so a crash never leaves
half a document behind.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from quotely.observability.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            # Browser storage treats unreadable values as absent; do the same
            logger.warning("Key-value store %s is not valid JSON, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Key-value store %s does not hold an object, starting empty", self.path)
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".kv-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read_all())

    def clear(self) -> None:
        with self._lock:
            self._write_all({})
