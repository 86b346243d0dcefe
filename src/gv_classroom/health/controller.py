from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/healthz", methods=["GET"], endpoint="healthz")
    def healthz():
        """Liveness plus database reachability.

        ``db`` is "connected", "disconnected", or "not_configured" when the app
        runs on in-memory repositories.
        """

        if container.conn is None:
            return jsonify({"ok": True, "db": "not_configured"}), 200
        connected = container.conn.ping()
        return jsonify({"ok": connected, "db": "connected" if connected else "disconnected"}), (
            200 if connected else 503
        )
