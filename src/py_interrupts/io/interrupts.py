"""Interrupt vectors, device delays, and the kernel entry/exit protocol.

Every trip into the kernel — a device completion, a system call, FORK,
EXEC — starts with the same four steps and ends with the same three:

    entry:  switch to kernel mode (1)
            save context (context_save_time)
            find vector n in memory (1)     address = base + n * entry_size
            load the vector's address into the PC (1)
    ... handler body ...
    exit:   IRET (1)
            restore context (context_save_time)
            switch to user mode (1)

Only the body differs between interrupt sources.  The vector table maps
interrupt numbers to ISR address strings; the device table maps device
numbers to ISR run times.  Both are read-only after loading.

Indexing either table out of range is a precondition violation with no
recovery: ``InterruptIndexError`` propagates and the run aborts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Generic, TypeVar, overload

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from py_interrupts.clock import Clock
    from py_interrupts.config import KernelConfig


class InterruptIndexError(IndexError):
    """Raise when an interrupt or device number is outside its table."""


T = TypeVar("T")


class _ReadOnlyTable(Sequence[T], Generic[T]):
    """Immutable, bounds-checked sequence indexed by interrupt/device number.

    Unlike a list, negative indices are rejected rather than wrapping
    around to the end of the table.
    """

    _kind = "entry"

    def __init__(self, items: Iterable[T]) -> None:
        self._items: tuple[T, ...] = tuple(items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: int | slice) -> T | Sequence[T]:
        if isinstance(index, slice):
            return self._items[index]
        if not 0 <= index < len(self._items):
            msg = f"{self._kind} {index} out of range (table has {len(self._items)} entries)"
            raise InterruptIndexError(msg)
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"


class VectorTable(_ReadOnlyTable[str]):
    """ISR addresses indexed by interrupt number."""

    _kind = "Interrupt vector"


class DeviceDelayTable(_ReadOnlyTable[int]):
    """ISR run times (ms) indexed by device number."""

    _kind = "Device"

    def __init__(self, items: Iterable[int]) -> None:
        """Create a delay table.

        Raises:
            ValueError: If any delay is negative.

        """
        super().__init__(items)
        for device, delay in enumerate(self._items):
            if delay < 0:
                msg = f"Device {device} has negative delay {delay}"
                raise ValueError(msg)


def vector_address(interrupt_number: int, *, base: int, entry_size: int) -> str:
    """Return the memory position of a vector as ``0xNNNN``."""
    return f"0x{base + interrupt_number * entry_size:04X}"


class InterruptProtocol:
    """Record the fixed kernel entry and exit sequences on a clock."""

    def __init__(self, *, clock: Clock, vectors: VectorTable, config: KernelConfig) -> None:
        """Bind the protocol to a clock, vector table, and timing constants."""
        self._clock = clock
        self._vectors = vectors
        self._config = config

    def enter(self, interrupt_number: int) -> int:
        """Record the four-step kernel entry for an interrupt.

        The vector is looked up before anything is recorded, so a bad
        interrupt number leaves the trace untouched.

        Args:
            interrupt_number: Index into the vector table.

        Returns:
            The clock value after the entry sequence.

        Raises:
            InterruptIndexError: If the number is outside the vector table.

        """
        isr_address = self._vectors[interrupt_number]
        position = vector_address(
            interrupt_number,
            base=self._config.vector_base,
            entry_size=self._config.vector_entry_size,
        )
        clock = self._clock
        clock.record(1, "switch to kernel mode")
        clock.record(self._config.context_save_time, "context saved")
        clock.record(1, f"find vector {interrupt_number} in memory position {position}")
        clock.record(1, f"load address {isr_address} into the PC")
        return clock.now

    def leave(self) -> int:
        """Record the three-step return to user mode.

        Returns:
            The clock value after the exit sequence.

        """
        clock = self._clock
        clock.record(1, "IRET")
        clock.record(self._config.context_save_time, "context restored")
        clock.record(1, "switch to user mode")
        return clock.now
