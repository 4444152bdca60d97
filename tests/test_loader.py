"""Tests for the input table loaders."""

from pathlib import Path

import pytest

from py_interrupts.config import ConfigError
from py_interrupts.loader import (
    load_device_table,
    load_program_catalog,
    load_trace,
    load_vector_table,
)


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


class TestTraceLoader:
    """Verify raw trace loading."""

    def test_lines_in_order(self, tmp_path: Path) -> None:
        """Trace lines come back in file order without terminators."""
        path = _write(tmp_path, "trace.txt", "CPU,50\nSYSCALL,0\n")
        assert load_trace(path) == ["CPU,50", "SYSCALL,0"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing trace is fatal."""
        with pytest.raises(ConfigError, match="Unable to open"):
            load_trace(tmp_path / "trace.txt")


class TestVectorTableLoader:
    """Verify vector table loading."""

    def test_line_number_is_vector_number(self, tmp_path: Path) -> None:
        """Line n holds vector n, even after an interior blank line."""
        path = _write(tmp_path, "vectors.txt", "0x01E3\n0x029C \n\n0x0695\n")
        table = load_vector_table(path)
        assert len(table) == 4
        assert table[1] == "0x029C"
        assert table[3] == "0x0695"

    def test_trailing_blank_lines_dropped(self, tmp_path: Path) -> None:
        """Blank lines at the end of the file add no vectors."""
        path = _write(tmp_path, "vectors.txt", "0x01E3\n0x029C\n\n\n")
        assert list(load_vector_table(path)) == ["0x01E3", "0x029C"]


class TestDeviceTableLoader:
    """Verify device delay loading."""

    def test_integers(self, tmp_path: Path) -> None:
        """Each line is one device's ISR duration."""
        path = _write(tmp_path, "delays.txt", "110\n150\n")
        assert list(load_device_table(path)) == [110, 150]

    def test_non_integer(self, tmp_path: Path) -> None:
        """A non-numeric delay is fatal."""
        path = _write(tmp_path, "delays.txt", "110\nslow\n")
        with pytest.raises(ConfigError, match="device 1"):
            load_device_table(path)

    def test_interior_blank_line(self, tmp_path: Path) -> None:
        """A blank line inside the table is a device with no delay."""
        path = _write(tmp_path, "delays.txt", "110\n\n150\n")
        with pytest.raises(ConfigError, match="device 1"):
            load_device_table(path)

    def test_trailing_blank_lines_dropped(self, tmp_path: Path) -> None:
        """Blank lines at the end of the file add no devices."""
        path = _write(tmp_path, "delays.txt", "110\n150\n\n")
        assert list(load_device_table(path)) == [110, 150]

    def test_negative(self, tmp_path: Path) -> None:
        """A negative delay is fatal."""
        path = _write(tmp_path, "delays.txt", "-5\n")
        with pytest.raises(ConfigError, match="negative"):
            load_device_table(path)


class TestCatalogLoader:
    """Verify external program catalog loading."""

    def test_entries_in_order(self, tmp_path: Path) -> None:
        """Entries keep file order."""
        path = _write(tmp_path, "external_files.txt", "program1,10\nprogram2, 15\n")
        catalog = load_program_catalog(path)
        assert [(p.name, p.size_mb) for p in catalog] == [("program1", 10), ("program2", 15)]

    def test_malformed_entry(self, tmp_path: Path) -> None:
        """A line without a size is fatal."""
        path = _write(tmp_path, "external_files.txt", "program1\n")
        with pytest.raises(ConfigError, match="malformed"):
            load_program_catalog(path)

    def test_bad_size(self, tmp_path: Path) -> None:
        """A non-numeric size is fatal."""
        path = _write(tmp_path, "external_files.txt", "program1,big\n")
        with pytest.raises(ConfigError):
            load_program_catalog(path)
