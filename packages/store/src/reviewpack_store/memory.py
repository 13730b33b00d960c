"""In-memory store - state lives only as long as the process.

Useful for tests and for scripted runs that drive every step from one
Python process.
"""

from __future__ import annotations

from reviewpack_store.base import BaseStore


class MemoryStore(BaseStore):
    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
