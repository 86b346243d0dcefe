from __future__ import annotations

from flask import Flask

from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    def dashboard_stats():
        return json_response(container.dashboard_service.stats())

    @app.route("/api/dashboard/clases-recientes", methods=["GET"], endpoint="dashboard_clases_recientes")
    def dashboard_clases_recientes():
        return json_response(container.dashboard_service.clases_recientes())
