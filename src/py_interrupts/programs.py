"""External program catalog — the programs EXEC can load from disk.

Each entry is a name and a size in megabytes.  Lookups are by exact
name and return the **first** match in catalog order, so a duplicate
name later in the file is shadowed by the earlier one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class ProgramNotFoundError(KeyError):
    """Raise when EXEC names a program that is not in the catalog."""


@dataclass(frozen=True)
class ExternalProgram:
    """A program stored on the simulated disk."""

    name: str
    size_mb: int


class ProgramCatalog:
    """Immutable, ordered list of external programs."""

    def __init__(self, programs: Iterable[ExternalProgram] = ()) -> None:
        """Create a catalog from programs in file order."""
        self._programs: tuple[ExternalProgram, ...] = tuple(programs)

    def __iter__(self) -> Iterator[ExternalProgram]:
        """Iterate programs in catalog order."""
        return iter(self._programs)

    def __len__(self) -> int:
        """Return the number of catalog entries."""
        return len(self._programs)

    def lookup(self, name: str) -> ExternalProgram:
        """Return the first program whose name matches exactly.

        Raises:
            ProgramNotFoundError: If no entry has this name.

        """
        for program in self._programs:
            if program.name == name:
                return program
        msg = f"Program {name!r} not found"
        raise ProgramNotFoundError(msg)
