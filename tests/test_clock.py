"""Tests for the simulation clock and execution trace."""

import pytest

from py_interrupts.clock import Clock, TraceEntry

CPU_BURST = 50
ISR_TIME = 20


class TestTraceEntry:
    """Verify trace entry rendering."""

    def test_str_format(self) -> None:
        """An entry renders as 'timestamp, duration, description'."""
        entry = TraceEntry(timestamp=50, duration=1, description="switch to kernel mode")
        assert str(entry) == "50, 1, switch to kernel mode"


class TestClock:
    """Verify clock advancing and recording."""

    def test_starts_at_zero(self) -> None:
        """A new clock reads 0 and has no entries."""
        clock = Clock()
        assert clock.now == 0
        assert len(clock) == 0

    def test_advance_returns_previous_time(self) -> None:
        """advance() returns the pre-advance timestamp."""
        clock = Clock()
        assert clock.advance(CPU_BURST) == 0
        assert clock.now == CPU_BURST

    def test_record_stamps_then_advances(self) -> None:
        """record() uses the current time, then moves the clock on."""
        clock = Clock()
        clock.record(CPU_BURST, "CPU execution")
        entry = clock.record(ISR_TIME, "SYSCALL: run the ISR")
        assert entry.timestamp == CPU_BURST
        assert clock.now == CPU_BURST + ISR_TIME

    def test_zero_duration_does_not_advance(self) -> None:
        """A zero-duration entry is logged but time stands still."""
        clock = Clock()
        clock.record(0, "scheduler called")
        assert clock.now == 0
        assert len(clock) == 1

    def test_negative_duration_rejected(self) -> None:
        """Time never moves backward."""
        clock = Clock()
        with pytest.raises(ValueError, match="Negative duration"):
            clock.record(-1, "bad")
        with pytest.raises(ValueError, match="backward"):
            clock.advance(-5)
        assert len(clock) == 0

    def test_negative_start_rejected(self) -> None:
        """A clock cannot start before zero."""
        with pytest.raises(ValueError, match="negative"):
            Clock(start=-1)

    def test_entries_are_a_copy(self) -> None:
        """Mutating the returned list leaves the trace intact."""
        clock = Clock()
        clock.record(1, "IRET")
        clock.entries.clear()
        assert len(clock.entries) == 1
