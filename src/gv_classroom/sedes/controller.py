from __future__ import annotations

from flask import Flask, request

from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sedes", methods=["GET"], endpoint="list_sedes")
    def list_sedes():
        return json_response(container.sedes_repo.list_sedes())

    @app.route("/api/salas", methods=["GET"], endpoint="list_salas")
    def list_salas():
        sede_id = request.args.get("sedeId") or None
        return json_response(container.sedes_repo.list_salas(sede_id=sede_id))
