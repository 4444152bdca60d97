"""Kernel diagnostics log.

The execution trace (see ``clock``) is the simulator's product.  The
diagnostics log is its side channel — a ``dmesg``-style record of what
the kernel noticed while replaying the trace: skipped lines, failed
EXEC lookups, scheduler decisions.  None of it ever reaches the trace.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, time).
- **Logger** — an append-only log with filtering.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for diagnostics.

    IntEnum so minimum-level filtering is a plain ``>=``.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured diagnostic.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The subsystem that generated the event (e.g. "exec").
        timestamp: Simulated time at which it was logged.

    """

    level: LogLevel
    message: str
    source: str
    timestamp: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source@time: message``."""
        return f"[{self.level.name}] {self.source}@{self.timestamp}: {self.message}"


class Logger:
    """Append-only diagnostics buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all diagnostics in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        timestamp: int = 0,
    ) -> None:
        """Append a new diagnostic.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Subsystem that generated the event.
            timestamp: Simulated time of the event.

        """
        self._entries.append(
            LogEntry(level=level, message=message, source=source, timestamp=timestamp)
        )

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return diagnostics matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)
