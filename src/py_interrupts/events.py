"""Trace events and the trace-file parser.

A trace is one event per line in the form ``ACTIVITY[,VALUE]``::

    CPU,50              run user code for 50 ms
    SYSCALL,3           system call serviced by device 3
    END_IO,3            device 3 finished its I/O
    FORK,10             clone the current process (value unused)
    EXEC program1,50    replace the current program (value unused)
    IF_CHILD,0          following events belong to the fork's child
    IF_PARENT,0         following events belong to the fork's parent
    ENDIF,0             end of the fork's conditional block

Lines are decoded once, here, into a closed set of event types; the
kernel then dispatches with an exhaustive ``match``.  Anything that does
not decode becomes a ``Malformed`` event carrying the reason, which the
kernel skips with a warning instead of guessing.

``Fork`` and ``Exec`` keep the line they came from, so status snapshots
can quote it; the line takes no part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterable

MISSING_VALUE = -1
EXEC_PREFIX = "EXEC"
BLANK_LINE = "blank line"


class DeviceKind(StrEnum):
    """Interrupt sources serviced by the generic ISR path."""

    SYSCALL = "SYSCALL"
    END_IO = "END_IO"


class CondMarker(StrEnum):
    """Markers delimiting the parent/child halves after a FORK."""

    IF_CHILD = "IF_CHILD"
    IF_PARENT = "IF_PARENT"
    ENDIF = "ENDIF"


@dataclass(frozen=True)
class CpuBurst:
    """User-mode execution for a fixed time."""

    duration: int

    def __str__(self) -> str:
        """Render in trace-file form."""
        return f"CPU,{self.duration}"


@dataclass(frozen=True)
class Fork:
    """Clone the current process."""

    line: str = field(default="", compare=False)

    def __str__(self) -> str:
        """Render in trace-file form."""
        return "FORK"


@dataclass(frozen=True)
class Exec:
    """Load a program from disk into the current process."""

    program: str
    line: str = field(default="", compare=False)

    def __str__(self) -> str:
        """Render in trace-file form."""
        return f"{EXEC_PREFIX} {self.program}"


@dataclass(frozen=True)
class DeviceInterrupt:
    """A system call or I/O completion on a device."""

    kind: DeviceKind
    device: int

    def __str__(self) -> str:
        """Render in trace-file form."""
        return f"{self.kind},{self.device}"


@dataclass(frozen=True)
class CondBlock:
    """A conditional-block marker."""

    marker: CondMarker

    def __str__(self) -> str:
        """Render in trace-file form."""
        return str(self.marker)


@dataclass(frozen=True)
class Malformed:
    """A trace line that could not be decoded."""

    line: str
    reason: str

    def __str__(self) -> str:
        """Render in trace-file form."""
        return self.line.strip()


Event: TypeAlias = CpuBurst | Fork | Exec | DeviceInterrupt | CondBlock | Malformed


def _parse_value(text: str | None) -> int:
    """Parse the VALUE field, returning MISSING_VALUE when absent or invalid."""
    if text is None:
        return MISSING_VALUE
    try:
        return int(text.strip())
    except ValueError:
        return MISSING_VALUE


def parse_trace_line(line: str) -> Event:
    """Decode a single trace line.

    Args:
        line: One line of the trace file (newline optional).

    Returns:
        The decoded event, or ``Malformed`` describing why it was not.

    """
    stripped = line.strip()
    if not stripped:
        return Malformed(line=line, reason=BLANK_LINE)

    activity, sep, rest = stripped.partition(",")
    activity = activity.strip()
    value = _parse_value(rest if sep else None)

    if activity.startswith(EXEC_PREFIX) and activity != EXEC_PREFIX:
        if activity[len(EXEC_PREFIX)] != " ":
            return Malformed(line=line, reason=f"unknown activity {activity!r}")
        program = activity[len(EXEC_PREFIX) + 1 :]
        if not program:
            return Malformed(line=line, reason="EXEC without a program name")
        return Exec(program=program, line=stripped)

    match activity:
        case "CPU":
            if value < 0:
                return Malformed(line=line, reason="CPU burst needs a non-negative duration")
            return CpuBurst(duration=value)
        case "FORK":
            return Fork(line=stripped)
        case "EXEC":
            return Malformed(line=line, reason="EXEC without a program name")
        case "SYSCALL" | "END_IO":
            return DeviceInterrupt(kind=DeviceKind(activity), device=value)
        case "IF_CHILD" | "IF_PARENT" | "ENDIF":
            return CondBlock(marker=CondMarker(activity))
        case _:
            return Malformed(line=line, reason=f"unknown activity {activity!r}")


def parse_trace(lines: Iterable[str]) -> list[Event]:
    """Decode every line of a trace, preserving order."""
    return [parse_trace_line(line) for line in lines]
