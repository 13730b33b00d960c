"""Abstract hand-off store interface.

Each wizard step reads the JSON blobs earlier steps wrote and writes its
own. The CLI depends on BaseStore rather than a concrete backend, so backends
are swappable without touching CLI code. Only one step runs at a time, so
writes are last-writer-wins with no locking.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class BaseStore(ABC):
    """Pluggable key/value storage for hand-off state between wizard steps."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw stored string, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a raw string under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present. Never raises for missing keys."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all stored keys."""

    def load_json(self, key: str) -> Any:
        """Return the decoded value, or None when missing or malformed.

        A malformed blob means "no prior step data", not a hard failure.
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed hand-off value for %r", key)
            return None

    def save_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Subclasses that hold connections override this.
        Default is a no-op so callers can always call close() safely.
        """
