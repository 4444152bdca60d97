"""Fixed-partition memory with first-fit allocation.

Main memory is carved into a handful of partitions at boot.  Their
sizes never change — a program either fits into a free partition or it
does not run.  Allocation is **first-fit**: scan partitions in ascending
id order and take the first free one that is large enough, even when a
later partition would fit more snugly.

    capacities  [40, 25, 15, 10, 8]   request 20 MB  →  partition 1 (40 MB)

Occupancy only ever moves ``free → program``.  Memory is never released
in this model, so every successful EXEC permanently consumes a slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class OutOfMemoryError(Exception):
    """Raise when no free partition can hold a program."""


class OccupantKind(StrEnum):
    """What currently lives in a partition."""

    FREE = "free"
    RESERVED = "reserved"
    PROGRAM = "program"


@dataclass(frozen=True)
class Occupant:
    """The contents of a partition.

    ``tag`` is the reservation tag (e.g. "init") or the program name;
    it is empty for free partitions.
    """

    kind: OccupantKind
    tag: str = ""

    FREE: ClassVar[Occupant]

    @classmethod
    def reserved(cls, tag: str) -> Occupant:
        """Return an occupant reserved for a system use such as init."""
        return cls(kind=OccupantKind.RESERVED, tag=tag)

    @classmethod
    def program(cls, name: str) -> Occupant:
        """Return an occupant holding the named program."""
        return cls(kind=OccupantKind.PROGRAM, tag=name)

    @property
    def is_free(self) -> bool:
        """Return True if nothing occupies the partition."""
        return self.kind is OccupantKind.FREE

    def __str__(self) -> str:
        """Render as ``free`` or the tag/program name."""
        return str(self.kind) if self.is_free else self.tag


Occupant.FREE = Occupant(kind=OccupantKind.FREE)


@dataclass
class Partition:
    """A fixed memory region.

    Attributes:
        id: Partition number.
        capacity_mb: Size in megabytes, fixed at boot.
        occupant: Current contents.

    """

    id: int
    capacity_mb: int
    occupant: Occupant = Occupant.FREE

    def fits(self, size_mb: int) -> bool:
        """Return True if the partition is free and large enough."""
        return self.occupant.is_free and self.capacity_mb >= size_mb


class PartitionTable:
    """The boot-time partition layout and its occupancy."""

    def __init__(self, partitions: Iterable[Partition]) -> None:
        """Create a table from the given partitions.

        Partitions are kept sorted by id so scans are always in
        ascending id order regardless of how they were supplied.

        Args:
            partitions: The partitions that exist at boot.

        Raises:
            ValueError: If two partitions share an id.

        """
        ordered = sorted(partitions, key=lambda p: p.id)
        ids = [p.id for p in ordered]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate partition ids: {ids}"
            raise ValueError(msg)
        self._partitions = ordered

    def __iter__(self) -> Iterator[Partition]:
        """Iterate in ascending id order."""
        return iter(self._partitions)

    def __len__(self) -> int:
        """Return the number of partitions."""
        return len(self._partitions)

    def get(self, partition_id: int) -> Partition:
        """Return the partition with the given id.

        Raises:
            KeyError: If no such partition exists.

        """
        for partition in self._partitions:
            if partition.id == partition_id:
                return partition
        msg = f"Partition {partition_id} does not exist"
        raise KeyError(msg)

    @property
    def free_count(self) -> int:
        """Return the number of unoccupied partitions."""
        return sum(1 for p in self._partitions if p.occupant.is_free)

    def first_fit(self, size_mb: int) -> Partition | None:
        """Return the first free partition that can hold size_mb, or None."""
        return next((p for p in self._partitions if p.fits(size_mb)), None)

    def allocate(self, program: str, size_mb: int) -> Partition:
        """Place a program into the first partition that fits.

        Args:
            program: Name of the program being loaded.
            size_mb: Program size in megabytes.

        Returns:
            The partition now holding the program.

        Raises:
            OutOfMemoryError: If no free partition is large enough.

        """
        partition = self.first_fit(size_mb)
        if partition is None:
            msg = f"No free partition can hold {program} ({size_mb} MB)"
            raise OutOfMemoryError(msg)
        partition.occupant = Occupant.program(program)
        return partition
