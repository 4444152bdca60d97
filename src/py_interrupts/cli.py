"""Command-line entry point — ``py-interrupts``.

Usage::

    py-interrupts TRACE VECTORS DELAYS [CATALOG] [--config KERNEL.json]
                  [--output-dir DIR] [--verbose]

The CLI is the thin I/O shell around the kernel: it loads the input
tables, runs the simulation, and writes the output files.  Exit codes:

- 0 — success, output written.
- 1 — unreadable input or bad configuration (usage is printed first),
  or an interrupt/device number outside its table.  Nothing is written.
- 2 — wrong arguments (argparse prints the usage message).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from py_interrupts.config import ConfigError, load_config
from py_interrupts.io.interrupts import InterruptIndexError
from py_interrupts.kernel import SimulationResult, simulate
from py_interrupts.loader import (
    load_device_table,
    load_program_catalog,
    load_trace,
    load_vector_table,
)
from py_interrupts.logging import LogLevel
from py_interrupts.output import EXECUTION_FILE, write_outputs

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser shared by the CLI and the web viewer."""
    parser = argparse.ArgumentParser(
        prog="py-interrupts",
        description="Replay a kernel event trace and log every timed kernel action.",
    )
    parser.add_argument("trace", type=Path, help="trace file (ACTIVITY[,VALUE] per line)")
    parser.add_argument("vectors", type=Path, help="vector table (one ISR address per line)")
    parser.add_argument("delays", type=Path, help="device table (one ISR duration per line)")
    parser.add_argument(
        "catalog",
        type=Path,
        nargs="?",
        default=None,
        help="external program catalog (name,size_mb per line)",
    )
    parser.add_argument("--config", type=Path, default=None, help="kernel config JSON")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(),
        help="directory for execution.txt and system_status.txt",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="print every kernel diagnostic, not just warnings",
    )
    return parser


def run_simulation(args: argparse.Namespace) -> SimulationResult:
    """Load every input named in args and run the simulation.

    Raises:
        ConfigError: If an input or the config cannot be loaded.
        InterruptIndexError: If the trace indexes outside a table.

    """
    config = load_config(args.config)
    trace = load_trace(args.trace)
    vectors = load_vector_table(args.vectors)
    delays = load_device_table(args.delays)
    catalog = load_program_catalog(args.catalog) if args.catalog is not None else None
    return simulate(trace, vectors=vectors, delays=delays, catalog=catalog, config=config)


def main(argv: list[str] | None = None) -> int:
    """Run the simulator and return a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        result = run_simulation(args)
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        return EXIT_FAILURE
    except InterruptIndexError as e:
        print(f"Error: simulation aborted: {e}", file=sys.stderr)  # noqa: T201
        return EXIT_FAILURE

    min_level = LogLevel.DEBUG if args.verbose else LogLevel.WARNING
    for entry in result.diagnostics:
        if entry.level >= min_level:
            print(entry, file=sys.stderr)  # noqa: T201

    try:
        write_outputs(result, args.output_dir)
    except OSError as e:
        print(f"Error opening output file: {e}", file=sys.stderr)  # noqa: T201
        return EXIT_FAILURE
    print(f"Output generated in {args.output_dir / EXECUTION_FILE}")  # noqa: T201
    return EXIT_OK


def run() -> None:
    """Console entry point for ``py-interrupts``."""
    sys.exit(main())
