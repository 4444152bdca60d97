"""Tests for the fixed partition table and first-fit allocation."""

import pytest

from py_interrupts.memory import (
    Occupant,
    OccupantKind,
    OutOfMemoryError,
    Partition,
    PartitionTable,
)

CAPACITIES = [40, 25, 15, 10, 8]


def _table() -> PartitionTable:
    return PartitionTable(Partition(id=i, capacity_mb=c) for i, c in enumerate(CAPACITIES, 1))


class TestOccupant:
    """Verify occupant kinds and rendering."""

    def test_free(self) -> None:
        """FREE renders as 'free'."""
        assert Occupant.FREE.is_free
        assert str(Occupant.FREE) == "free"

    def test_reserved_and_program(self) -> None:
        """Reserved and program occupants render their tag."""
        assert str(Occupant.reserved("init")) == "init"
        assert Occupant.program("program1").kind is OccupantKind.PROGRAM
        assert not Occupant.program("program1").is_free


class TestFirstFit:
    """Verify first-fit selection."""

    def test_first_sufficient_not_best(self) -> None:
        """20 MB goes to the 40 MB partition, never the 25 MB one."""
        partition = _table().first_fit(20)
        assert partition is not None
        assert partition.id == 1
        assert partition.capacity_mb == CAPACITIES[0]

    def test_exact_fit_allowed(self) -> None:
        """A program exactly the partition's size fits."""
        table = _table()
        table.allocate("a", 40)
        partition = table.first_fit(25)
        assert partition is not None
        assert partition.id == 2

    def test_skips_occupied(self) -> None:
        """Occupied partitions are never chosen."""
        table = _table()
        table.allocate("a", 5)
        table.allocate("b", 5)
        assert table.get(1).occupant == Occupant.program("a")
        assert table.get(2).occupant == Occupant.program("b")

    def test_reserved_never_chosen(self) -> None:
        """A reserved partition is not free."""
        table = PartitionTable(
            [Partition(id=1, capacity_mb=100, occupant=Occupant.reserved("init"))]
        )
        assert table.first_fit(1) is None

    def test_scan_is_by_ascending_id(self) -> None:
        """Partitions supplied out of order are still scanned by id."""
        table = PartitionTable(
            [Partition(id=3, capacity_mb=50), Partition(id=1, capacity_mb=50)]
        )
        assert [p.id for p in table] == [1, 3]
        partition = table.first_fit(10)
        assert partition is not None
        assert partition.id == 1


class TestAllocate:
    """Verify allocation and its failure mode."""

    def test_too_big(self) -> None:
        """Nothing fits a 41 MB program; no partition changes."""
        table = _table()
        with pytest.raises(OutOfMemoryError):
            table.allocate("huge", 41)
        assert table.free_count == len(CAPACITIES)

    def test_capacity_never_changes(self) -> None:
        """Allocation marks the occupant but leaves capacity alone."""
        table = _table()
        partition = table.allocate("small", 1)
        assert partition.capacity_mb == CAPACITIES[0]
        assert table.free_count == len(CAPACITIES) - 1

    def test_exhaustion(self) -> None:
        """Once every partition is used, further allocations fail."""
        table = _table()
        for name in "abcde":
            table.allocate(name, 1)
        with pytest.raises(OutOfMemoryError):
            table.allocate("f", 1)


class TestTable:
    """Verify lookup helpers."""

    def test_get_unknown(self) -> None:
        """Unknown ids raise KeyError."""
        with pytest.raises(KeyError):
            _table().get(99)

    def test_duplicate_ids(self) -> None:
        """Two partitions cannot share an id."""
        with pytest.raises(ValueError, match="Duplicate"):
            PartitionTable([Partition(id=1, capacity_mb=1), Partition(id=1, capacity_mb=2)])
