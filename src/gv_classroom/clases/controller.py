from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import json_response
from ..container import Container
from .model import ClaseFilter


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clases", methods=["GET"], endpoint="list_clases")
    def list_clases():
        criteria = ClaseFilter.from_args(request.args)
        return json_response(container.clase_service.list_clases(criteria))

    @app.route("/api/clases/mis-clases", methods=["GET"], endpoint="mis_clases")
    @with_session(container.tokens)
    def mis_clases(auth):
        return json_response(
            container.clase_service.mis_clases(
                profesor_id=auth.user_id,
                desde=request.args.get("desde"),
                hasta=request.args.get("hasta"),
            )
        )

    @app.route("/api/clases/alumno", methods=["GET"], endpoint="clases_alumno")
    def clases_alumno():
        return json_response(
            container.clase_service.clases_alumno(
                alumno_id=request.args.get("alumnoId"),
                desde=request.args.get("desde"),
                hasta=request.args.get("hasta"),
            )
        )

    @app.route("/api/clases/desactivadas", methods=["GET"], endpoint="clases_desactivadas")
    def clases_desactivadas():
        return json_response(
            container.clase_service.desactivadas(
                sala_id=request.args.get("salaId") or None,
                fecha=request.args.get("fecha"),
            )
        )

    @app.route("/api/clases/<clase_id>", methods=["GET"], endpoint="clase_detalle")
    def clase_detalle(clase_id: str):
        return json_response(container.clase_service.get_detail(clase_id))
