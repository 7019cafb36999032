"""Flask application factory for the MMU simulator JSON API.

The ``create_app`` function builds a memory manager and returns a Flask
app with these endpoints:

- ``GET /api/memory`` — frame and page owners plus usage stats.
- ``GET /api/processes`` — live processes.
- ``POST /api/processes`` — admit a process (``{"size": n}``).
- ``POST /api/processes/<pid>/request`` — request memory (``{"size": n}``).
- ``POST /api/processes/<pid>/translate`` — translate (``{"address": a}``).
- ``GET /api/processes/<pid>/page-table`` — every entry as frame and valid bit.
- ``DELETE /api/processes/<pid>`` — terminate and release memory.
- ``GET /api/log`` — the event log.

MMU refusals become 409 (capacity, denial, allocation failure) or 422
(address out of range); unknown pids are 404; malformed bodies are 400.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flask import Flask, Response, jsonify, request

from mmu_sim.config import DEFAULT_CONFIG, MmuConfig
from mmu_sim.errors import AddressOutOfRangeError, MmuError
from mmu_sim.memory.manager import MemoryManager
from mmu_sim.process.pcb import Process

_HTTP_CREATED = 201
_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409
_HTTP_UNPROCESSABLE = 422

JsonReply = tuple[Response, int] | Response


def _process_json(process: Process) -> dict[str, Any]:
    """Serialise a process descriptor."""
    return {
        "pid": process.pid,
        "declared_size": process.declared_size,
        "granted_size": process.granted_size,
        "state": str(process.state),
        "page_faults": process.page_faults,
    }


def _error(message: str, status: int) -> tuple[Response, int]:
    return jsonify({"error": message}), status


def _int_field(name: str) -> int | None:
    """Return an integer field from the JSON body, or None if absent/invalid."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    value = data.get(name)  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def create_app(*, config: MmuConfig = DEFAULT_CONFIG) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Machine configuration for the served memory manager.

    Returns:
        A configured Flask application ready to serve.

    """
    manager = MemoryManager(config=config)
    app = Flask(__name__)
    app.extensions["mmu_sim.manager"] = manager

    def _lookup(pid: int) -> Process | None:
        try:
            return manager.process(pid)
        except ValueError:
            return None

    def _refusal(error: MmuError) -> tuple[Response, int]:
        out_of_range = isinstance(error, AddressOutOfRangeError)
        status = _HTTP_UNPROCESSABLE if out_of_range else _HTTP_CONFLICT
        return jsonify({"error": str(error), "kind": type(error).__name__}), status

    @app.route("/api/memory")
    def memory() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return frame owners, page owners, and stats."""
        return jsonify(
            {
                "frames": list(manager.physical_snapshot()),
                "pages": list(manager.virtual_snapshot()),
                "stats": asdict(manager.stats()),
            }
        )

    @app.route("/api/processes")
    def list_processes() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every live process."""
        return jsonify({"processes": [_process_json(p) for p in manager.processes()]})

    @app.route("/api/processes", methods=["POST"])
    def create_process() -> JsonReply:  # pyright: ignore[reportUnusedFunction]
        """Admit a new process.  Expects ``{"size": n}``."""
        size = _int_field("size")
        if size is None or size <= 0:
            return _error("Missing or invalid 'size' field", _HTTP_BAD_REQUEST)
        try:
            process = manager.create_process(declared_size=size)
        except MmuError as e:
            return _refusal(e)
        return jsonify(_process_json(process)), _HTTP_CREATED

    @app.route("/api/processes/<int:pid>/request", methods=["POST"])
    def memory_request(pid: int) -> JsonReply:  # pyright: ignore[reportUnusedFunction]
        """Request memory for a process.  Expects ``{"size": n}``."""
        process = _lookup(pid)
        if process is None:
            return _error(f"Process {pid} not found", _HTTP_NOT_FOUND)
        size = _int_field("size")
        if size is None or not 1 <= size <= process.declared_size:
            return _error("Missing or invalid 'size' field", _HTTP_BAD_REQUEST)
        try:
            manager.memory_request(pid, size)
        except MmuError as e:
            return _refusal(e)
        return jsonify(_process_json(process))

    @app.route("/api/processes/<int:pid>/translate", methods=["POST"])
    def translate(pid: int) -> JsonReply:  # pyright: ignore[reportUnusedFunction]
        """Translate a logical address.  Expects ``{"address": a}``."""
        process = _lookup(pid)
        if process is None:
            return _error(f"Process {pid} not found", _HTTP_NOT_FOUND)
        address = _int_field("address")
        if address is None:
            return _error("Missing or invalid 'address' field", _HTTP_BAD_REQUEST)
        try:
            translation = manager.translate(pid, address)
        except MmuError as e:
            return _refusal(e)
        except ValueError as e:
            return _error(str(e), _HTTP_BAD_REQUEST)
        return jsonify(asdict(translation))

    @app.route("/api/processes/<int:pid>/page-table")
    def page_table(pid: int) -> JsonReply:  # pyright: ignore[reportUnusedFunction]
        """Return every page-table entry of a process as ``(frame, valid)``."""
        if _lookup(pid) is None:
            return _error(f"Process {pid} not found", _HTTP_NOT_FOUND)
        rows = manager.page_table_snapshot(pid)
        entries = [
            {"outer": outer, "inner": inner, "frame": frame, "valid": valid}
            for outer, row in enumerate(rows)
            for inner, (frame, valid) in enumerate(row)
        ]
        return jsonify({"pid": pid, "entries": entries})

    @app.route("/api/processes/<int:pid>", methods=["DELETE"])
    def terminate(pid: int) -> JsonReply:  # pyright: ignore[reportUnusedFunction]
        """Terminate a process and release its memory."""
        if _lookup(pid) is None:
            return _error(f"Process {pid} not found", _HTTP_NOT_FOUND)
        manager.terminate(pid)
        return jsonify({"pid": pid, "terminated": True})

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the event log as formatted lines."""
        return jsonify({"entries": manager.logger.lines()})

    return app


def main() -> None:
    """Run the JSON API development server.

    This is the ``mmu-sim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080, threaded=False)
