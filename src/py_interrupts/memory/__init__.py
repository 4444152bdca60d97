"""Memory subsystem — fixed partitions and first-fit allocation.

Re-exports public symbols so callers can write::

    from py_interrupts.memory import PartitionTable, OutOfMemoryError
"""

from py_interrupts.memory.partitions import (
    Occupant,
    OccupantKind,
    OutOfMemoryError,
    Partition,
    PartitionTable,
)

__all__ = [
    "Occupant",
    "OccupantKind",
    "OutOfMemoryError",
    "Partition",
    "PartitionTable",
]
