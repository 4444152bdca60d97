"""Rendering and writing of simulation output.

Two files are produced per run:

- ``execution.txt`` — every trace entry as ``<time>, <duration>, <text>``
  followed by a dump of the final partition and process tables.
- ``system_status.txt`` — the process table captured after each FORK
  and EXEC.

Rendering is pure (result in, string out) so it is testable without
touching the file system; ``write_outputs`` is the thin I/O wrapper.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from py_interrupts.kernel import SimulationResult
    from py_interrupts.memory.partitions import Partition
    from py_interrupts.process.pcb import ProcessRecord

EXECUTION_FILE = "execution.txt"
STATUS_FILE = "system_status.txt"


def _optional(value: int | None) -> str:
    return "none" if value is None else str(value)


def format_partition(partition: Partition) -> str:
    """Render one partition row."""
    return f"Partition {partition.id}: {partition.capacity_mb} MB - Code: {partition.occupant}"


def format_process(process: ProcessRecord) -> str:
    """Render one PCB row."""
    return (
        f"PID {process.pid}: {process.program_name} "
        f"(PPID {_optional(process.parent_pid)}, "
        f"Partition {_optional(process.partition_id)}, {process.size_mb} MB, "
        f"State: {process.state}, Priority: {process.priority})"
    )


def _lines(items: Iterable[str]) -> str:
    return "".join(f"{item}\n" for item in items)


def render_final_state(result: SimulationResult) -> str:
    """Render the end-of-run partition table, PCB table, and ready queue."""
    queue = " ".join(str(pid) for pid in result.ready_queue) or "empty"
    return (
        "=== FINAL SYSTEM STATE ===\n"
        "Partition Table:\n"
        + _lines(format_partition(p) for p in result.partitions)
        + "\nPCB Table:\n"
        + _lines(format_process(p) for p in result.processes)
        + f"\nReady Queue: {queue}\n"
    )


def render_execution(result: SimulationResult) -> str:
    """Render the full execution log: trace entries then final state."""
    return _lines(str(entry) for entry in result.trace) + "\n" + render_final_state(result)


def render_status(result: SimulationResult) -> str:
    """Render every FORK/EXEC process-table snapshot."""
    blocks = [
        f"time: {snap.timestamp}; current trace: {snap.trace_line}\n"
        + _lines(format_process(p) for p in snap.processes)
        for snap in result.snapshots
    ]
    return "\n".join(blocks)


def write_outputs(result: SimulationResult, directory: Path) -> tuple[Path, Path]:
    """Write ``execution.txt`` and ``system_status.txt`` into directory.

    Returns:
        The paths of the execution and status files.

    Raises:
        OSError: If the directory cannot be created or written.

    """
    directory.mkdir(parents=True, exist_ok=True)
    execution_path = directory / EXECUTION_FILE
    status_path = directory / STATUS_FILE
    execution_path.write_text(render_execution(result))
    status_path.write_text(render_status(result))
    return execution_path, status_path
