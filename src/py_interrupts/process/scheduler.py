"""Ready queue and scheduling policies.

The scheduler owns the ready queue and delegates the *ordering* decision
to a pluggable SchedulingPolicy.  Two policies ship:

- **FCFSPolicy** (First Come, First Served): pure FIFO.
- **PriorityPolicy**: highest priority first, FIFO among equals.  Since
  FORK gives each child a priority one above its parent, this policy
  models "child runs first".

The simulator replays its trace strictly in order, so the queue never
decides what executes next — it records the scheduling *outcome* that
shows up in the state dumps and in the scheduler's diagnostics.

Design: Strategy pattern
    The Scheduler is the *context*; SchedulingPolicy is the *strategy*.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol

from py_interrupts.process.pcb import ProcessRecord, ProcessState

if TYPE_CHECKING:
    from collections.abc import Iterator


class SchedulingPolicy(Protocol):
    """Interface that every scheduling policy must satisfy."""

    name: str

    def order(self, ready_queue: deque[ProcessRecord]) -> list[ProcessRecord]:
        """Return the queued processes in dispatch order."""
        ...  # pragma: no cover


class FCFSPolicy:
    """First Come, First Served — processes run in arrival order."""

    name = "fcfs"

    def order(self, ready_queue: deque[ProcessRecord]) -> list[ProcessRecord]:
        """Return the queue unchanged (oldest arrival first)."""
        return list(ready_queue)


class PriorityPolicy:
    """Priority scheduling — highest priority process runs first.

    Tiebreaker: equal priorities keep arrival order, since ``sorted`` is
    stable and the deque preserves insertion order.
    """

    name = "priority"

    def order(self, ready_queue: deque[ProcessRecord]) -> list[ProcessRecord]:
        """Return the queue sorted by descending priority."""
        return sorted(ready_queue, key=lambda p: p.priority, reverse=True)


def policy_for(name: str) -> SchedulingPolicy:
    """Return the policy registered under name.

    Raises:
        ValueError: If the name is unknown.

    """
    match name:
        case "fcfs":
            return FCFSPolicy()
        case "priority":
            return PriorityPolicy()
        case _:
            msg = f"Unknown scheduling policy: {name}"
            raise ValueError(msg)


class Scheduler:
    """Own the ready queue; delegate ordering to a policy."""

    def __init__(self, *, policy: SchedulingPolicy | None = None) -> None:
        """Create a scheduler with an empty ready queue.

        Args:
            policy: Ordering strategy; defaults to PriorityPolicy.

        """
        self._policy: SchedulingPolicy = policy if policy is not None else PriorityPolicy()
        self._ready_queue: deque[ProcessRecord] = deque()

    @property
    def policy(self) -> SchedulingPolicy:
        """Return the active scheduling policy."""
        return self._policy

    def __len__(self) -> int:
        """Return the number of queued processes."""
        return len(self._ready_queue)

    def __contains__(self, pid: object) -> bool:
        """Return True if a process with this PID is queued."""
        return any(p.pid == pid for p in self._ready_queue)

    def __iter__(self) -> Iterator[ProcessRecord]:
        """Iterate queued processes in dispatch order."""
        return iter(self.ordered())

    def add(self, process: ProcessRecord) -> None:
        """Queue a process and mark it READY.

        Raises:
            ValueError: If the process is already queued.

        """
        if process.pid in self:
            msg = f"Process {process.pid} is already in the ready queue"
            raise ValueError(msg)
        process.state = ProcessState.READY
        self._ready_queue.append(process)

    def remove(self, pid: int) -> ProcessRecord:
        """Take a specific process out of the queue.

        Raises:
            KeyError: If the PID is not queued.

        """
        for process in self._ready_queue:
            if process.pid == pid:
                self._ready_queue.remove(process)
                return process
        msg = f"Process {pid} is not in the ready queue"
        raise KeyError(msg)

    def ordered(self) -> list[ProcessRecord]:
        """Return the queued processes in the order the policy would run them."""
        return self._policy.order(self._ready_queue)

    def peek(self) -> ProcessRecord | None:
        """Return the process the policy would dispatch next, or None."""
        ordered = self.ordered()
        return ordered[0] if ordered else None


    def select(self, pid: int | None = None) -> ProcessRecord | None:
        """Dequeue a process and mark it RUNNING.

        Args:
            pid: The process to dispatch.  If omitted, the policy's next
                pick is dispatched.

        Returns:
            The dispatched process, or None if the queue is empty.

        Raises:
            KeyError: If pid is given but not queued.

        """
        if pid is None:
            nxt = self.peek()
            if nxt is None:
                return None
            pid = nxt.pid
        process = self.remove(pid)
        process.state = ProcessState.RUNNING
        return process
