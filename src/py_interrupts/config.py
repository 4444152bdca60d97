"""Kernel configuration — timing constants and the memory layout.

Every number the kernel uses lives here: how long a context save takes,
where the vector table sits in memory, how fast the loader reads from
disk, and which partitions exist at boot.  The defaults reproduce the
classic assignment setup (10 ms context switch, 2-byte vectors at 0x0000,
15 ms per MB loader, five user partitions plus a 2 MB init partition).

A JSON file can override any subset of the keys::

    {"context_save_time": 20, "scheduling_policy": "fcfs"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

SCHEDULING_POLICIES = frozenset({"fcfs", "priority"})

DEFAULT_PARTITIONS: tuple[tuple[int, int], ...] = (
    (1, 40),
    (2, 25),
    (3, 15),
    (4, 10),
    (5, 8),
)


class ConfigError(Exception):
    """Raise when inputs or configuration cannot be loaded.

    These are fatal: the simulation never starts.
    """


@dataclass(frozen=True)
class KernelConfig:
    """Immutable kernel settings for one simulation run.

    Attributes:
        context_save_time: Duration of a context save (and restore).
        vector_base: Memory address of vector 0.
        vector_entry_size: Bytes per vector table entry.
        fork_vector: Interrupt number reserved for FORK.
        exec_vector: Interrupt number reserved for EXEC.
        loader_ms_per_mb: Disk loader speed used by EXEC.
        fork_clone_time: Duration of cloning a PCB.
        pcb_update_time: Duration of rewriting a PCB after EXEC.
        error_time: Duration of a logged kernel error.
        scheduling_policy: ``"priority"`` (child first) or ``"fcfs"``.
        partitions: ``(id, capacity_mb)`` pairs of the user partitions.
        init_partition: ``(id, capacity_mb)`` of the partition reserved
            for the init process.
        init_program: Program name of the init process.

    """

    context_save_time: int = 10
    vector_base: int = 0
    vector_entry_size: int = 2
    fork_vector: int = 2
    exec_vector: int = 3
    loader_ms_per_mb: int = 15
    fork_clone_time: int = 1
    pcb_update_time: int = 1
    error_time: int = 1
    scheduling_policy: str = "priority"
    partitions: tuple[tuple[int, int], ...] = DEFAULT_PARTITIONS
    init_partition: tuple[int, int] = (6, 2)
    init_program: str = "init"

    def __post_init__(self) -> None:
        """Validate the settings.

        Raises:
            ConfigError: On a negative constant, an unknown policy, or
                duplicate partition ids.

        """
        for f in fields(self):
            if not isinstance(f.default, int):
                continue
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool):
                msg = f"{f.name} must be an integer, got {value!r}"
                raise ConfigError(msg)
            if value < 0:
                msg = f"{f.name} must not be negative, got {value}"
                raise ConfigError(msg)
        if self.scheduling_policy not in SCHEDULING_POLICIES:
            msg = (
                f"Unknown scheduling policy {self.scheduling_policy!r} "
                f"(expected one of {sorted(SCHEDULING_POLICIES)})"
            )
            raise ConfigError(msg)
        ids = [pid for pid, _ in self.partitions] + [self.init_partition[0]]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate partition ids in {ids}"
            raise ConfigError(msg)
        if any(size < 0 for _, size in (*self.partitions, self.init_partition)):
            msg = "Partition capacities must not be negative"
            raise ConfigError(msg)


def _pairs(value: Any, key: str) -> tuple[tuple[int, int], ...]:
    """Convert a JSON list of ``[id, size]`` pairs to a tuple of tuples."""
    try:
        return tuple((int(a), int(b)) for a, b in value)
    except (TypeError, ValueError) as e:
        msg = f"{key} must be a list of [id, capacity_mb] pairs"
        raise ConfigError(msg) from e


def load_config(path: Path | None = None) -> KernelConfig:
    """Load kernel settings from a JSON file, or return the defaults.

    Missing keys keep their default values; unknown keys are rejected so
    a typo never silently falls back to a default.

    Args:
        path: JSON file to read, or None for the built-in defaults.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or invalid.

    """
    if path is None:
        return KernelConfig()
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load kernel config: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = f"Kernel config {path} must hold a JSON object"
        raise ConfigError(msg)

    known = {f.name for f in fields(KernelConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown kernel config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    if "partitions" in data:
        data["partitions"] = _pairs(data["partitions"], "partitions")
    if "init_partition" in data:
        (data["init_partition"],) = _pairs([data["init_partition"]], "init_partition")
    try:
        return KernelConfig(**data)
    except TypeError as e:
        msg = f"Invalid kernel config: {e}"
        raise ConfigError(msg) from e
