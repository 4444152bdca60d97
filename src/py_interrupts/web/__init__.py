"""Browser-based viewer for a finished simulation.

This package provides a Flask application that shows the execution
trace and final kernel state of one run.  It is an **optional** extra —
install with::

    pip install py-interrupts[web]

The ``create_app`` factory in ``app.py`` takes a ``SimulationResult``
and serves:

- ``GET /`` — HTML page with the rendered execution log.
- ``GET /api/trace`` — trace entries as JSON.
- ``GET /api/state`` — final partitions, processes, and ready queue.
- ``GET /api/status`` — the FORK/EXEC process-table snapshots.
"""
