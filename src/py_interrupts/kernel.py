"""The kernel — event interpreter and kernel-state machine.

The kernel replays a decoded trace one event at a time.  Each event maps
to a handler that records timed actions on the clock and, for FORK and
EXEC, mutates the partition and process tables:

    CpuBurst         →  "CPU execution" (no kernel entry)
    DeviceInterrupt  →  entry(device)  ISR(delay)                      exit
    Fork             →  entry(2)       clone PCB, scheduler called     exit
    Exec             →  entry(3)       load, PCB updated, sched called exit
    CondBlock        →  switch the current process (no trace entries)
    Malformed        →  skipped with a warning (no trace entries)

Every handler runs to completion before the next event is dispatched;
there is no preemption and no nesting.

All mutable state of a run lives in one ``SimulationState`` that the
kernel owns and threads through its handlers — there are no module
globals.  Recoverable failures (unknown program, no partition fits,
missing caller) become a one-duration ``ERROR`` entry followed by the
normal exit sequence.  An interrupt or device number outside its table
raises ``InterruptIndexError`` and aborts the run.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, assert_never

from py_interrupts.clock import Clock, TraceEntry
from py_interrupts.config import KernelConfig
from py_interrupts.events import (
    BLANK_LINE,
    CondBlock,
    CondMarker,
    CpuBurst,
    DeviceInterrupt,
    DeviceKind,
    Exec,
    Fork,
    Malformed,
    parse_trace,
)
from py_interrupts.io.interrupts import InterruptProtocol
from py_interrupts.logging import LogEntry, Logger, LogLevel
from py_interrupts.memory.partitions import (
    Occupant,
    OutOfMemoryError,
    Partition,
    PartitionTable,
)
from py_interrupts.process.pcb import (
    ProcessNotFoundError,
    ProcessRecord,
    ProcessState,
    ProcessTable,
)
from py_interrupts.process.scheduler import Scheduler, policy_for
from py_interrupts.programs import ProgramCatalog, ProgramNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_interrupts.events import Event
    from py_interrupts.io.interrupts import DeviceDelayTable, VectorTable


@dataclass(frozen=True)
class StatusSnapshot:
    """The process table as it stood right after a FORK or EXEC.

    Attributes:
        timestamp: Clock value after the event's exit sequence.
        trace_line: The event that produced the snapshot.
        processes: Copies of every PCB, in table order.

    """

    timestamp: int
    trace_line: str
    processes: tuple[ProcessRecord, ...]


@dataclass(frozen=True)
class ForkBlock:
    """A parent/child pair whose conditional block is open."""

    parent_pid: int
    child_pid: int


@dataclass
class SimulationState:
    """Everything one simulation run mutates."""

    clock: Clock
    partitions: PartitionTable
    processes: ProcessTable
    scheduler: Scheduler
    logger: Logger
    current_pid: int
    pending_fork: ForkBlock | None = None
    open_blocks: list[ForkBlock] = field(default_factory=lambda: list[ForkBlock]())
    snapshots: list[StatusSnapshot] = field(default_factory=lambda: list[StatusSnapshot]())

    @classmethod
    def boot(cls, config: KernelConfig) -> SimulationState:
        """Create the boot-time state: partitions, init process, empty queue.

        The init process (PID 0, no parent) occupies the reserved init
        partition and starts RUNNING.
        """
        init_id, init_size = config.init_partition
        partitions = PartitionTable(
            [Partition(id=pid, capacity_mb=size) for pid, size in config.partitions]
            + [
                Partition(
                    id=init_id,
                    capacity_mb=init_size,
                    occupant=Occupant.reserved(config.init_program),
                )
            ]
        )
        processes = ProcessTable()
        init = processes.create_root(
            program_name=config.init_program,
            partition_id=init_id,
            size_mb=init_size,
        )
        logger = Logger()
        logger.log(
            LogLevel.INFO,
            f"booted with {len(partitions)} partitions, init is PID {init.pid}",
            source="kernel",
        )
        return cls(
            clock=Clock(),
            partitions=partitions,
            processes=processes,
            scheduler=Scheduler(policy=policy_for(config.scheduling_policy)),
            logger=logger,
            current_pid=init.pid,
        )


@dataclass(frozen=True)
class SimulationResult:
    """An immutable record of a finished (or paused) run."""

    trace: tuple[TraceEntry, ...]
    partitions: tuple[Partition, ...]
    processes: tuple[ProcessRecord, ...]
    ready_queue: tuple[int, ...]
    snapshots: tuple[StatusSnapshot, ...]
    diagnostics: tuple[LogEntry, ...]
    end_time: int


class Kernel:
    """Interpret trace events against the simulated kernel state."""

    def __init__(
        self,
        *,
        vectors: VectorTable,
        delays: DeviceDelayTable,
        catalog: ProgramCatalog | None = None,
        config: KernelConfig | None = None,
    ) -> None:
        """Boot a kernel with the given static tables.

        Args:
            vectors: ISR addresses indexed by interrupt number.
            delays: ISR run times indexed by device number.
            catalog: Programs available to EXEC (empty if omitted).
            config: Timing constants and memory layout.

        """
        self._config = config if config is not None else KernelConfig()
        self._vectors = vectors
        self._delays = delays
        self._catalog = catalog if catalog is not None else ProgramCatalog()
        self._state = SimulationState.boot(self._config)
        self._protocol = InterruptProtocol(
            clock=self._state.clock,
            vectors=vectors,
            config=self._config,
        )

    @property
    def state(self) -> SimulationState:
        """Return the live simulation state."""
        return self._state

    @property
    def config(self) -> KernelConfig:
        """Return the kernel configuration."""
        return self._config

    @property
    def clock(self) -> Clock:
        """Return the simulation clock."""
        return self._state.clock

    def _log(self, level: LogLevel, message: str, *, source: str) -> None:
        self._state.logger.log(level, message, source=source, timestamp=self._state.clock.now)

    def _error(self, message: str, *, source: str) -> None:
        """Record a recoverable kernel error in both the trace and diagnostics."""
        self._log(LogLevel.WARNING, message, source=source)
        self._state.clock.record(self._config.error_time, f"ERROR: {message}")

    def _call_scheduler(self) -> None:
        self._state.clock.record(0, "scheduler called")
        nxt = self._state.scheduler.peek()
        if nxt is None:
            self._log(LogLevel.DEBUG, "ready queue empty", source="scheduler")
        else:
            self._log(
                LogLevel.DEBUG,
                f"next ready: PID {nxt.pid} (priority {nxt.priority})",
                source="scheduler",
            )

    def _snapshot(self, trace_line: str) -> None:
        state = self._state
        state.snapshots.append(
            StatusSnapshot(
                timestamp=state.clock.now,
                trace_line=trace_line,
                processes=tuple(dataclasses.replace(p) for p in state.processes),
            )
        )

    # -- Handlers -------------------------------------------------------------

    def cpu_burst(self, duration: int) -> None:
        """Run user code for duration ms; no kernel entry."""
        self._state.clock.record(duration, "CPU execution")

    def device_interrupt(self, kind: DeviceKind, device: int) -> None:
        """Service a SYSCALL or END_IO through the generic ISR path.

        Both the delay and the vector are looked up before anything is
        recorded, so an out-of-range device leaves the trace untouched.

        Raises:
            InterruptIndexError: If device is outside the delay or vector table.

        """
        delay = self._delays[device]
        self._protocol.enter(device)
        self._state.clock.record(delay, f"{kind}: run the ISR")
        self._protocol.leave()

    def fork(self, *, trace_line: str = "") -> ProcessRecord | None:
        """Clone the current process.

        Args:
            trace_line: The originating trace line, quoted in the status
                snapshot.

        Returns:
            The child's PCB, or None if the caller was not found.

        """
        state = self._state
        caller = state.current_pid
        self._protocol.enter(self._config.fork_vector)
        try:
            child = state.processes.fork(caller)
        except ProcessNotFoundError:
            self._error(f"process {caller} not found", source="fork")
            self._protocol.leave()
            return None

        state.scheduler.add(child)
        state.clock.record(self._config.fork_clone_time, "PCB cloned for child process")
        self._log(LogLevel.DEBUG, f"PID {caller} forked PID {child.pid}", source="fork")
        self._call_scheduler()
        self._protocol.leave()
        state.pending_fork = ForkBlock(parent_pid=caller, child_pid=child.pid)
        self._snapshot(trace_line or str(Fork()))
        return child

    def exec(self, program: str, *, trace_line: str = "") -> ProcessRecord | None:
        """Replace the current process's program with one from the catalog.

        Args:
            program: Name to look up in the catalog.
            trace_line: The originating trace line, quoted in the status
                snapshot.

        Returns:
            The updated PCB, or None if the program was not found or
            no partition could hold it.

        """
        state = self._state
        cfg = self._config
        self._protocol.enter(cfg.exec_vector)
        try:
            record = state.processes.get(state.current_pid)
            entry = self._catalog.lookup(program)
            partition = state.partitions.allocate(entry.name, entry.size_mb)
        except ProcessNotFoundError:
            self._error(f"process {state.current_pid} not found", source="exec")
            self._protocol.leave()
            return None
        except ProgramNotFoundError:
            self._error(f"program {program} not found", source="exec")
            self._protocol.leave()
            return None
        except OutOfMemoryError:
            self._error(f"no partition available for {program}", source="exec")
            self._protocol.leave()
            return None

        state.clock.record(
            entry.size_mb * cfg.loader_ms_per_mb,
            f"loading {program} from disk to partition {partition.id}",
        )
        state.clock.record(cfg.pcb_update_time, "PCB updated with new program info")
        record.program_name = entry.name
        record.partition_id = partition.id
        record.size_mb = entry.size_mb
        self._log(
            LogLevel.DEBUG,
            f"PID {record.pid} now runs {program} in partition {partition.id}",
            source="exec",
        )
        self._call_scheduler()
        self._protocol.leave()
        self._snapshot(trace_line or str(Exec(program=program)))
        return record

    def conditional(self, marker: CondMarker) -> None:
        """Switch the current process for a conditional-block marker.

        ``IF_CHILD`` and ``IF_PARENT`` open the block of the most recent
        FORK (if not already open) and switch to the child or parent.
        ``ENDIF`` closes the innermost block and returns to its parent.
        Markers carry no timing cost and never reach the trace.
        """
        state = self._state
        if marker is CondMarker.ENDIF:
            if not state.open_blocks:
                self._log(LogLevel.WARNING, "ENDIF without an open block", source="trace")
                return
            block = state.open_blocks.pop()
            self._switch_to(block.parent_pid)
            return

        if state.pending_fork is not None:
            state.open_blocks.append(state.pending_fork)
            state.pending_fork = None
        if not state.open_blocks:
            self._log(LogLevel.WARNING, f"{marker} without a preceding FORK", source="trace")
            return
        block = state.open_blocks[-1]
        target = block.child_pid if marker is CondMarker.IF_CHILD else block.parent_pid
        self._switch_to(target)

    def _switch_to(self, pid: int) -> None:
        state = self._state
        if pid == state.current_pid:
            return
        incoming = state.processes.get(pid)
        outgoing = state.processes.find(state.current_pid)
        if outgoing is not None and outgoing.state is ProcessState.RUNNING:
            state.scheduler.add(outgoing)
        if pid in state.scheduler:
            state.scheduler.select(pid)
        else:
            incoming.state = ProcessState.RUNNING
        self._log(
            LogLevel.DEBUG,
            f"switched from PID {state.current_pid} to PID {pid}",
            source="scheduler",
        )
        state.current_pid = pid

    # -- Interpreter ----------------------------------------------------------

    def dispatch(self, event: Event) -> None:
        """Run the handler for one event."""
        match event:
            case CpuBurst(duration=duration):
                self.cpu_burst(duration)
            case DeviceInterrupt(kind=kind, device=device):
                self.device_interrupt(kind, device)
            case Fork(line=line):
                self.fork(trace_line=line)
            case Exec(program=program, line=line):
                self.exec(program, trace_line=line)
            case CondBlock(marker=marker):
                self.conditional(marker)
            case Malformed(reason=reason):
                level = LogLevel.DEBUG if reason == BLANK_LINE else LogLevel.WARNING
                self._log(level, f"skipped {str(event)!r}: {reason}", source="trace")
            case _:
                assert_never(event)

    def run(self, events: Iterable[Event]) -> SimulationResult:
        """Dispatch events in order and return the resulting state.

        Raises:
            InterruptIndexError: If an event names an interrupt or device
                outside the loaded tables.

        """
        for event in events:
            self.dispatch(event)
        return self.result()

    def result(self) -> SimulationResult:
        """Return an immutable copy of the current state."""
        state = self._state
        return SimulationResult(
            trace=tuple(state.clock.entries),
            partitions=tuple(dataclasses.replace(p) for p in state.partitions),
            processes=tuple(dataclasses.replace(p) for p in state.processes),
            ready_queue=tuple(p.pid for p in state.scheduler.ordered()),
            snapshots=tuple(state.snapshots),
            diagnostics=tuple(state.logger.entries),
            end_time=state.clock.now,
        )


def simulate(
    trace_lines: Iterable[str],
    *,
    vectors: VectorTable,
    delays: DeviceDelayTable,
    catalog: ProgramCatalog | None = None,
    config: KernelConfig | None = None,
) -> SimulationResult:
    """Parse a trace and replay it on a freshly booted kernel."""
    kernel = Kernel(vectors=vectors, delays=delays, catalog=catalog, config=config)
    return kernel.run(parse_trace(trace_lines))
