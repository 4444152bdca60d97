"""Simulation clock and execution trace.

Every kernel micro-operation takes a fixed (or computed) number of
milliseconds.  The clock is the single source of simulated time: each
operation is **recorded** at the current time and then the clock
**advances** by the operation's duration.

    record(1, "IRET")   at t=83  →  "83, 1, IRET"   and now t=84

The resulting trace is append-only and chronological — entries are
never edited or reordered once written.  Textual rendering is deferred
to the output boundary; the clock only stores structured entries.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TraceEntry:
    """One timed kernel action.

    Attributes:
        timestamp: Simulated time (ms) at which the action started.
        duration: How long the action took (ms), never negative.
        description: Human-readable action text (e.g. "context saved").

    """

    timestamp: int
    duration: int
    description: str

    def __str__(self) -> str:
        """Format as ``<timestamp>, <duration>, <description>``."""
        return f"{self.timestamp}, {self.duration}, {self.description}"


class Clock:
    """A monotonically increasing simulated clock with a trace buffer."""

    def __init__(self, *, start: int = 0) -> None:
        """Create a clock at the given start time.

        Args:
            start: Initial simulated time in milliseconds.

        Raises:
            ValueError: If start is negative.

        """
        if start < 0:
            msg = f"Clock cannot start at negative time {start}"
            raise ValueError(msg)
        self._now = start
        self._entries: list[TraceEntry] = []

    @property
    def now(self) -> int:
        """Return the current simulated time."""
        return self._now

    @property
    def entries(self) -> list[TraceEntry]:
        """Return all trace entries in chronological order."""
        return list(self._entries)

    def __len__(self) -> int:
        """Return the number of recorded entries."""
        return len(self._entries)

    def advance(self, delta: int) -> int:
        """Move the clock forward without recording anything.

        Args:
            delta: Milliseconds to add.

        Returns:
            The time before the advance.

        Raises:
            ValueError: If delta is negative.

        """
        if delta < 0:
            msg = f"Cannot move the clock backward by {delta}"
            raise ValueError(msg)
        before = self._now
        self._now += delta
        return before

    def record(self, duration: int, description: str) -> TraceEntry:
        """Append an entry stamped with the current time, then advance.

        A zero duration is legal: the entry is logged and time stands
        still (used for the "scheduler called" marker).

        Args:
            duration: Length of the action in milliseconds.
            description: What the kernel did.

        Returns:
            The entry that was appended.

        Raises:
            ValueError: If duration is negative.

        """
        if duration < 0:
            msg = f"Negative duration {duration} for {description!r}"
            raise ValueError(msg)
        entry = TraceEntry(timestamp=self._now, duration=duration, description=description)
        self._entries.append(entry)
        self.advance(duration)
        return entry
