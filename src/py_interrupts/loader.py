"""Input file loaders.

The simulator reads up to four plain-text tables:

- **trace** — one event per line (decoded later by ``events``).
- **vector table** — one ISR address per line; line n is vector n.
- **device table** — one ISR duration per line; line n is device n.
- **program catalog** — ``name,size_mb`` per line (optional).

Blank lines inside the vector and device tables still count, so the
numbering never shifts; a blank device line is an error since it has
no duration.

Any file that cannot be read, or a table entry that does not parse, is
a fatal ``ConfigError``: the simulation never starts with bad tables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_interrupts.config import ConfigError
from py_interrupts.io.interrupts import DeviceDelayTable, VectorTable
from py_interrupts.programs import ExternalProgram, ProgramCatalog

if TYPE_CHECKING:
    from pathlib import Path


def _read_lines(path: Path) -> list[str]:
    """Return the lines of a text file without line terminators.

    Raises:
        ConfigError: If the file cannot be read.

    """
    try:
        return path.read_text().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Unable to open file: {path} ({e})"
        raise ConfigError(msg) from e


def _table_lines(path: Path) -> list[str]:
    """Return the stripped lines of a table file, one per table slot.

    Line n is entry n, so interior blank lines keep their slot.  Only
    blank lines at the end of the file are dropped.
    """
    lines = [line.strip() for line in _read_lines(path)]
    while lines and not lines[-1]:
        lines.pop()
    return lines


def load_trace(path: Path) -> list[str]:
    """Return the raw trace lines, in file order."""
    return _read_lines(path)


def load_vector_table(path: Path) -> VectorTable:
    """Load ISR addresses; line n is interrupt vector n."""
    return VectorTable(_table_lines(path))


def load_device_table(path: Path) -> DeviceDelayTable:
    """Load ISR durations; line n is device n.

    Raises:
        ConfigError: If a line is not a non-negative integer.  Blank lines
            count as device slots, so an interior blank line is rejected.

    """
    delays: list[int] = []
    for number, line in enumerate(_table_lines(path)):
        try:
            delays.append(int(line))
        except ValueError as e:
            msg = f"{path}: device {number} has non-integer delay {line!r}"
            raise ConfigError(msg) from e
    try:
        return DeviceDelayTable(delays)
    except ValueError as e:
        msg = f"{path}: {e}"
        raise ConfigError(msg) from e


def load_program_catalog(path: Path) -> ProgramCatalog:
    """Load ``name,size_mb`` entries in file order.

    Raises:
        ConfigError: If a line is not ``name,size`` with a non-negative size.

    """
    programs: list[ExternalProgram] = []
    for line in filter(None, _table_lines(path)):
        name, sep, size = line.partition(",")
        name = name.strip()
        try:
            size_mb = int(size)
        except ValueError:
            size_mb = -1
        if not sep or not name or size_mb < 0:
            msg = f"{path}: malformed program entry {line!r} (expected name,size_mb)"
            raise ConfigError(msg)
        programs.append(ExternalProgram(name=name, size_mb=size_mb))
    return ProgramCatalog(programs)
