"""Process Control Blocks and the process table.

The kernel tracks every process through a PCB: its PID, its parent, the
program it runs, where that program lives in memory, and its scheduling
state.  Records are created two ways:

- **Boot** — the init process (PID 0, no parent) is created once.
- **FORK** — the caller's PCB is cloned.  The child gets the next
  unused PID, remembers its parent, and is given a higher priority so
  it sorts ahead of the parent in the ready queue (child runs first).

EXEC does not create a record; it rewrites the caller's program name,
partition, and size in place.  Records are never removed — TERMINATED
is a logical state only.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class ProcessNotFoundError(KeyError):
    """Raise when a PID is not in the process table."""


class ProcessState(StrEnum):
    """Lifecycle states of a process."""

    RUNNING = "running"
    READY = "ready"
    WAITING = "waiting"
    TERMINATED = "terminated"


@dataclass
class ProcessRecord:
    """A Process Control Block.

    Attributes:
        pid: Unique process identifier, never reassigned.
        parent_pid: PID of the parent, None only for init.
        program_name: Program currently loaded.
        partition_id: Partition holding the program, if any.
        size_mb: Program size in megabytes.
        state: Scheduling state.
        priority: Higher values are dispatched first.

    """

    pid: int
    parent_pid: int | None
    program_name: str
    partition_id: int | None
    size_mb: int
    state: ProcessState = ProcessState.READY
    priority: int = 0

    def clone(self, *, pid: int, parent_pid: int, priority: int) -> ProcessRecord:
        """Return a copy of this record with a new identity.

        Every field except pid, parent_pid, and priority is copied as-is,
        including the partition — the child shares its parent's memory
        until it EXECs.
        """
        return dataclasses.replace(self, pid=pid, parent_pid=parent_pid, priority=priority)


class ProcessTable:
    """All PCBs of one simulation run, in creation order."""

    def __init__(self) -> None:
        """Create an empty process table."""
        self._records: dict[int, ProcessRecord] = {}

    def __iter__(self) -> Iterator[ProcessRecord]:
        """Iterate records in creation order."""
        return iter(self._records.values())

    def __len__(self) -> int:
        """Return the number of records."""
        return len(self._records)

    def __contains__(self, pid: object) -> bool:
        """Return True if the PID has a record."""
        return pid in self._records

    @property
    def next_pid(self) -> int:
        """Return the PID the next created process will receive."""
        return max(self._records, default=-1) + 1

    def create_root(
        self,
        *,
        program_name: str,
        partition_id: int | None,
        size_mb: int,
    ) -> ProcessRecord:
        """Create the parentless init process in the RUNNING state.

        Raises:
            RuntimeError: If the table already holds a process.

        """
        if self._records:
            msg = "The root process must be the first process created"
            raise RuntimeError(msg)
        record = ProcessRecord(
            pid=self.next_pid,
            parent_pid=None,
            program_name=program_name,
            partition_id=partition_id,
            size_mb=size_mb,
            state=ProcessState.RUNNING,
        )
        self._records[record.pid] = record
        return record

    def find(self, pid: int) -> ProcessRecord | None:
        """Return the record for pid, or None if there is none."""
        return self._records.get(pid)

    def get(self, pid: int) -> ProcessRecord:
        """Return the record for pid.

        Raises:
            ProcessNotFoundError: If the PID is unknown.

        """
        record = self._records.get(pid)
        if record is None:
            msg = f"Process {pid} not found"
            raise ProcessNotFoundError(msg)
        return record

    def fork(self, parent_pid: int) -> ProcessRecord:
        """Clone a process into a new child.

        The child is an exact copy of the parent at clone time apart from
        its pid, parent_pid, and priority.  Queuing it (and so making it
        READY) is the scheduler's job.

        Args:
            parent_pid: The calling process.

        Returns:
            The child's record (already stored in the table).

        Raises:
            ProcessNotFoundError: If the parent does not exist.

        """
        parent = self.get(parent_pid)
        child = parent.clone(
            pid=self.next_pid,
            parent_pid=parent.pid,
            priority=parent.priority + 1,
        )
        self._records[child.pid] = child
        return child
