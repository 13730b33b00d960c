"""Run-scoped log collector.

One RunLog is created per command invocation and passed explicitly to the
collaborators that report progress. Entries are also forwarded to the
standard logging hierarchy so --verbose output and the collected entries
never disagree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str  # "debug" | "info" | "warn" | "error"
    category: str  # e.g. "Jira", "GitHub", "Files", "LLM"
    message: str
    details: str | None = None


@dataclass
class RunLog:
    entries: list[LogEntry] = field(default_factory=list)

    def add(self, level: str, category: str, message: str, details: str | None = None) -> LogEntry:
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        entry = LogEntry(datetime.now(timezone.utc), level, category, message, details)
        self.entries.append(entry)
        if details:
            logger.log(_LEVELS[level], "[%s] %s: %s", category, message, details)
        else:
            logger.log(_LEVELS[level], "[%s] %s", category, message)
        return entry

    def debug(self, category: str, message: str, details: str | None = None) -> LogEntry:
        return self.add("debug", category, message, details)

    def info(self, category: str, message: str, details: str | None = None) -> LogEntry:
        return self.add("info", category, message, details)

    def warn(self, category: str, message: str, details: str | None = None) -> LogEntry:
        return self.add("warn", category, message, details)

    def error(self, category: str, message: str, details: str | None = None) -> LogEntry:
        return self.add("error", category, message, details)

    def filter(
        self,
        level: str | list[str] | None = None,
        category: str | list[str] | None = None,
        since: datetime | None = None,
    ) -> list[LogEntry]:
        levels = [level] if isinstance(level, str) else level
        categories = [category] if isinstance(category, str) else category
        return [
            e
            for e in self.entries
            if (not levels or e.level in levels)
            and (not categories or e.category in categories)
            and (since is None or e.timestamp >= since)
        ]

    def clear(self) -> None:
        self.entries.clear()


def format_error(error: BaseException) -> str:
    """Render an exception as ``"<ExceptionName>: <message>"`` for user display."""
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name
