"""Mock portfolio service for E2E and integration testing.

Implements the single endpoint the viewer depends on:
- GET /<code>: 200 {code, data, available_views} or 404 {error}

Codes match case-insensitively. Profiles come from the shared JSON fixture
(tests/fixtures/portfolio-fixture.json). Every request is recorded so tests
can assert how many lookups a flow caused.
"""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

from flask import Flask, jsonify
from werkzeug.serving import make_server

FIXTURE_PATH = Path(__file__).resolve().parents[1] / "tests" / "fixtures" / "portfolio-fixture.json"

# Mock data storage
PROFILES: Dict[str, Dict[str, Any]] = {}  # lower-cased code -> {code, portfolio}
REQUEST_LOG: List[str] = []  # raw codes as requested
FAILURE_MODE: Dict[str, Optional[str]] = {"mode": None}  # None | "error" | "malformed" | "not_json"

AVAILABLE_VIEWS = 19


def load_fixture(path: Path = FIXTURE_PATH) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def create_mock_api_app() -> Flask:
    """Create and configure the mock portfolio service Flask app."""
    app = Flask(__name__)
    app.config['TESTING'] = True

    @app.route('/<path:code>', methods=['GET'])
    def lookup(code: str):
        REQUEST_LOG.append(code)

        mode = FAILURE_MODE["mode"]
        if mode == "error":
            return jsonify({"error": "Internal error"}), 500
        if mode == "not_json":
            return "<html>gateway timeout</html>", 200, {"Content-Type": "text/html"}

        profile = PROFILES.get(unquote(code).lower())
        if profile is None:
            return jsonify({"error": "Code not found"}), 404

        if mode == "malformed":
            return jsonify({"code": profile["code"], "data": {"summary": "no name"}}), 200

        return jsonify({
            "code": profile["code"],
            "data": profile["portfolio"],
            "available_views": AVAILABLE_VIEWS,
        }), 200

    return app


def reset_mock_state():
    """Clear recorded requests and failure mode; reload fixture profiles."""
    PROFILES.clear()
    REQUEST_LOG.clear()
    FAILURE_MODE["mode"] = None
    seed_profiles(load_fixture()["profiles"])


def seed_profiles(profiles: List[Dict[str, Any]]):
    for profile in profiles:
        PROFILES[profile["code"].lower()] = profile


def set_failure_mode(mode: Optional[str]):
    FAILURE_MODE["mode"] = mode


class MockPortfolioAPIServer:
    """Wrapper for running the mock service in a background thread."""

    def __init__(self, host: str = '127.0.0.1', port: int = 0):
        self.host = host
        self.app = create_mock_api_app()
        self.server = make_server(host, port, self.app, threaded=True)
        self.port = self.server.server_port
        self.thread: threading.Thread | None = None

    def start(self):
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()

    def stop(self):
        if self.thread is None:
            return
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=5)
        self.thread = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def requests(self) -> List[str]:
        return REQUEST_LOG


if __name__ == '__main__':
    # For running the mock service by hand
    reset_mock_state()
    app = create_mock_api_app()
    print("Mock portfolio service running on http://127.0.0.1:5000")
    print(f"Codes: {', '.join(p['code'] for p in PROFILES.values())}")
    app.run(host='127.0.0.1', port=5000, debug=True)
