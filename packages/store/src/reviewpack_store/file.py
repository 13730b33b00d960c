"""FileStore - the default hand-off store, one JSON document on disk.

Data format: a single JSON object (default `.reviewpack/state.json`) mapping
each hand-off key to its raw string value. The file is re-read on every
access so separate `reviewpack` invocations see each other's writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from reviewpack_store.base import BaseStore

logger = logging.getLogger(__name__)

DEFAULT_PATH = ".reviewpack/state.json"


class FileStore(BaseStore):
    def __init__(self, path: str = DEFAULT_PATH):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Hand-off file %s is malformed; starting from empty state.", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self._path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())
