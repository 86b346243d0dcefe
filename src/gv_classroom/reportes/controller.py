from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import get_json_body, json_response
from ..container import Container
from .model import ReporteFilter


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reportes-error", methods=["GET"], endpoint="list_reportes")
    def list_reportes():
        return json_response(container.reporte_service.list_reportes(ReporteFilter.from_args(request.args)))

    @app.route("/api/reportes-error", methods=["POST"], endpoint="create_reporte")
    @with_session(container.tokens)
    def create_reporte(auth):
        return json_response(container.reporte_service.create_reporte(auth=auth, data=get_json_body()), 201)
