"""Flask application factory for the simulation viewer.

``create_app`` wraps an already-computed ``SimulationResult``; the app
itself never mutates kernel state, so every request sees the same run.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from flask import Flask, Response, jsonify, render_template

from py_interrupts.cli import build_parser, run_simulation
from py_interrupts.config import ConfigError
from py_interrupts.io.interrupts import InterruptIndexError
from py_interrupts.output import format_process, render_execution

if TYPE_CHECKING:
    from py_interrupts.kernel import SimulationResult
    from py_interrupts.process.pcb import ProcessRecord


def _process_json(process: ProcessRecord) -> dict[str, object]:
    return {
        "pid": process.pid,
        "parent_pid": process.parent_pid,
        "program_name": process.program_name,
        "partition_id": process.partition_id,
        "size_mb": process.size_mb,
        "state": str(process.state),
        "priority": process.priority,
    }


def create_app(result: SimulationResult) -> Flask:
    """Create a Flask app serving one simulation result.

    Args:
        result: The finished run to display.

    Returns:
        A configured Flask application ready to serve.

    """
    execution = render_execution(result)

    app = Flask(__name__)

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the execution log page."""
        return render_template(
            "index.html",
            execution=execution,
            entries=len(result.trace),
            end_time=result.end_time,
        )

    @app.route("/api/trace")
    def trace() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every trace entry as JSON."""
        return jsonify(
            {
                "end_time": result.end_time,
                "entries": [
                    {
                        "timestamp": e.timestamp,
                        "duration": e.duration,
                        "description": e.description,
                    }
                    for e in result.trace
                ],
            }
        )

    @app.route("/api/state")
    def state() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the final partition table, PCB table, and ready queue."""
        return jsonify(
            {
                "partitions": [
                    {
                        "id": p.id,
                        "capacity_mb": p.capacity_mb,
                        "occupant": str(p.occupant),
                        "kind": str(p.occupant.kind),
                    }
                    for p in result.partitions
                ],
                "processes": [_process_json(p) for p in result.processes],
                "ready_queue": list(result.ready_queue),
            }
        )

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the FORK/EXEC process-table snapshots."""
        return jsonify(
            {
                "snapshots": [
                    {
                        "timestamp": s.timestamp,
                        "trace_line": s.trace_line,
                        "processes": [format_process(p) for p in s.processes],
                    }
                    for s in result.snapshots
                ],
            }
        )

    return app


def main() -> None:
    """Run a simulation and serve it on the development server.

    This is the ``py-interrupts-web`` console entry point.  It accepts
    the same positional arguments as ``py-interrupts``.
    """
    parser = build_parser()
    parser.prog = "py-interrupts-web"
    args = parser.parse_args()
    try:
        result = run_simulation(args)
    except (ConfigError, InterruptIndexError) as e:
        print(f"Error: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    create_app(result).run(debug=True, port=8080)
