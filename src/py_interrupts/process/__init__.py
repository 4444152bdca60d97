"""Process subsystem — PCBs, the process table, and the ready queue.

Re-exports public symbols so callers can write::

    from py_interrupts.process import ProcessTable, Scheduler
"""

from py_interrupts.process.pcb import (
    ProcessNotFoundError,
    ProcessRecord,
    ProcessState,
    ProcessTable,
)
from py_interrupts.process.scheduler import (
    FCFSPolicy,
    PriorityPolicy,
    Scheduler,
    SchedulingPolicy,
    policy_for,
)

__all__ = [
    "FCFSPolicy",
    "PriorityPolicy",
    "ProcessNotFoundError",
    "ProcessRecord",
    "ProcessState",
    "ProcessTable",
    "Scheduler",
    "SchedulingPolicy",
    "policy_for",
]
