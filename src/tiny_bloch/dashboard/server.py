"""
tiny-bloch Dashboard Server.

A Flask application exposing Bloch sphere sessions as a JSON API:
- Gate catalog
- Session lifecycle (create / inspect / delete)
- Gate application and reset
- Frame-by-frame animation polling

Usage:
    from tiny_bloch.dashboard import launch
    launch(port=8888)
"""

from __future__ import annotations

import threading
import uuid
import webbrowser
from typing import Any, Dict, Optional

from tiny_bloch.config import DEFAULT_CONFIG, AnimationConfig
from tiny_bloch.gates import Gate
from tiny_bloch.session import BlochSession


# ---------------------------------------------------------------------------
# Gate metadata for the frontend
# ---------------------------------------------------------------------------

_GATE_DESCRIPTIONS = {
    Gate.X: "Pauli-X (NOT gate)",
    Gate.Y: "Pauli-Y gate",
    Gate.Z: "Pauli-Z (phase flip)",
    Gate.S: "S gate (√Z)",
    Gate.T: "T gate (π/8)",
    Gate.H: "Hadamard (creates superposition)",
}

GATE_CATALOG = [
    {
        "name": gate.value,
        "label": gate.value,
        "description": _GATE_DESCRIPTIONS[gate],
        "axis": [float(v) for v in gate.axis],
        "angle": float(gate.angle),
        "latex": gate.latex,
    }
    for gate in Gate
]


# ---------------------------------------------------------------------------
# Session registry
# ---------------------------------------------------------------------------

class SessionRegistry:
    """Sessions owned by one app, each guarded by its own lock."""

    def __init__(self, config: AnimationConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._sessions: Dict[str, BlochSession] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        with self._guard:
            self._sessions[session_id] = BlochSession(config=self.config)
            self._locks[session_id] = threading.Lock()
        return session_id

    def get(self, session_id: str) -> Optional[tuple[BlochSession, threading.Lock]]:
        with self._guard:
            if session_id not in self._sessions:
                return None
            return self._sessions[session_id], self._locks[session_id]

    def delete(self, session_id: str) -> bool:
        with self._guard:
            self._locks.pop(session_id, None)
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(config: Optional[AnimationConfig] = None) -> Any:
    """Create and configure the Flask application."""
    try:
        from flask import Flask, jsonify, request
    except ImportError:
        raise ImportError(
            "Flask is required for the dashboard. Install it with:\n"
            "  pip install flask\n"
            "Or install tiny-bloch with dashboard extras:\n"
            "  pip install tiny-bloch[dashboard]"
        )

    app = Flask(__name__)
    app.json.sort_keys = False
    registry = SessionRegistry(config or DEFAULT_CONFIG)
    app.extensions["tiny_bloch"] = registry

    def not_found(session_id: str):
        return jsonify({"error": f"Unknown session: {session_id}"}), 404

    # ---- Routes ----

    @app.route("/api/gates")
    def api_gates():
        return jsonify(GATE_CATALOG)

    @app.route("/api/sessions", methods=["POST"])
    def api_create_session():
        session_id = registry.create()
        session, lock = registry.get(session_id)
        with lock:
            snapshot = session.snapshot()
        return jsonify({"id": session_id, **snapshot}), 201

    @app.route("/api/sessions/<session_id>", methods=["GET"])
    def api_get_session(session_id):
        found = registry.get(session_id)
        if found is None:
            return not_found(session_id)
        session, lock = found
        with lock:
            return jsonify({"id": session_id, **session.snapshot()})

    @app.route("/api/sessions/<session_id>", methods=["DELETE"])
    def api_delete_session(session_id):
        if not registry.delete(session_id):
            return not_found(session_id)
        return jsonify({"deleted": session_id})

    @app.route("/api/sessions/<session_id>/gates", methods=["POST"])
    def api_apply_gate(session_id):
        found = registry.get(session_id)
        if found is None:
            return not_found(session_id)
        session, lock = found
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object like {\"gate\": \"H\"}"}), 400
        name = data.get("gate", "")
        with lock:
            if not session.apply(name):
                return jsonify({"error": session.diagnostics[-1]}), 400
            return jsonify({"id": session_id, **session.snapshot()})

    @app.route("/api/sessions/<session_id>/reset", methods=["POST"])
    def api_reset(session_id):
        found = registry.get(session_id)
        if found is None:
            return not_found(session_id)
        session, lock = found
        with lock:
            session.reset()
            return jsonify({"id": session_id, **session.snapshot()})

    @app.route("/api/sessions/<session_id>/frame", methods=["GET"])
    def api_frame(session_id):
        found = registry.get(session_id)
        if found is None:
            return not_found(session_id)
        session, lock = found
        with lock:
            frame = session.tick()
            return jsonify({
                "frame": frame.to_dict() if frame is not None else None,
                "running": session.is_animating,
            })

    return app


def launch(port: int = 8888, host: str = "127.0.0.1", debug: bool = False,
           open_browser: bool = False):
    """
    Launch the tiny-bloch dashboard API.

    Parameters
    ----------
    port : int
        Port to serve on (default 8888).
    host : str
        Host address (default localhost).
    debug : bool
        Enable Flask debug mode.
    open_browser : bool
        Open the gate catalog in a browser.
    """
    app = create_app()

    url = f"http://{host}:{port}"
    print(f"tiny-bloch dashboard API: {url}/api/gates  (Ctrl+C to stop)")

    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(f"{url}/api/gates")).start()

    app.run(host=host, port=port, debug=debug)
