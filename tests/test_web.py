"""Tests for the browser-based simulation viewer.

Tests use ``pytest.importorskip`` so they are skipped gracefully when
Flask is not installed.
"""

from __future__ import annotations

from typing import Any

import pytest

flask = pytest.importorskip("flask")

from py_interrupts.io import DeviceDelayTable, VectorTable  # noqa: E402
from py_interrupts.kernel import simulate  # noqa: E402
from py_interrupts.programs import ExternalProgram, ProgramCatalog  # noqa: E402
from py_interrupts.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_NOT_FOUND = 404
GOLDEN_END = 95


def _result() -> Any:
    return simulate(
        ["CPU,50", "SYSCALL,0", "FORK", "EXEC program1"],
        vectors=VectorTable(["v0", "v1", "v2", "v3"]),
        delays=DeviceDelayTable([20]),
        catalog=ProgramCatalog([ExternalProgram(name="program1", size_mb=10)]),
    )


def _create_client() -> Any:
    """Create a test client from a fresh app."""
    app = create_app(_result())
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify app factory and landing page."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(_result()), flask.Flask)

    def test_index_shows_trace(self) -> None:
        """GET / renders the execution log as HTML."""
        response = _create_client().get("/")
        assert response.status_code == HTTP_OK
        assert "text/html" in response.content_type
        assert b"0, 50, CPU execution" in response.data
        assert b"FINAL SYSTEM STATE" in response.data

    def test_unknown_route(self) -> None:
        """Unknown paths are 404."""
        assert _create_client().get("/api/nope").status_code == HTTP_NOT_FOUND


class TestApi:
    """Verify the JSON endpoints."""

    def test_trace(self) -> None:
        """GET /api/trace returns every entry in order."""
        data = _create_client().get("/api/trace").get_json()
        first = data["entries"][0]
        assert first == {"timestamp": 0, "duration": 50, "description": "CPU execution"}
        assert data["entries"][8]["description"] == "switch to user mode"
        assert data["entries"][8]["timestamp"] == GOLDEN_END - 1

    def test_state(self) -> None:
        """GET /api/state returns partitions, processes, and queue."""
        data = _create_client().get("/api/state").get_json()
        assert data["partitions"][0] == {
            "id": 1,
            "capacity_mb": 40,
            "occupant": "program1",
            "kind": "program",
        }
        assert [p["pid"] for p in data["processes"]] == [0, 1]
        assert data["processes"][1]["parent_pid"] == 0
        assert data["processes"][1]["state"] == "ready"
        assert data["ready_queue"] == [1]

    def test_status(self) -> None:
        """GET /api/status returns one snapshot per FORK/EXEC."""
        data = _create_client().get("/api/status").get_json()
        assert [s["trace_line"] for s in data["snapshots"]] == ["FORK", "EXEC program1"]
