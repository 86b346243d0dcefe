from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import get_json_body, json_response
from ..container import Container
from .model import DispositivoFilter, IncidenciaFilter


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dispositivos", methods=["GET"], endpoint="list_dispositivos")
    def list_dispositivos():
        return json_response(container.dispositivo_service.list_dispositivos(DispositivoFilter.from_args(request.args)))

    @app.route("/api/dispositivos/<dispositivo_id>/historial", methods=["GET"], endpoint="historial_dispositivo")
    def historial_dispositivo(dispositivo_id: str):
        return json_response(container.dispositivo_service.historial_dispositivo(dispositivo_id))

    @app.route("/api/incidencias-dispositivos", methods=["GET"], endpoint="list_incidencias")
    def list_incidencias():
        return json_response(container.dispositivo_service.list_incidencias(IncidenciaFilter.from_args(request.args)))

    @app.route("/api/incidencias-dispositivos/historial", methods=["GET"], endpoint="historial_incidencias")
    def historial_incidencias():
        return json_response(
            container.dispositivo_service.historial_incidencias(IncidenciaFilter.from_args(request.args))
        )

    @app.route("/api/incidencias-dispositivos/<incidencia_id>/homologar", methods=["POST"], endpoint="homologar")
    @with_session(container.tokens)
    def homologar(incidencia_id: str, auth):
        return json_response(
            container.dispositivo_service.homologar(
                actor_id=auth.user_id, incidencia_id=incidencia_id, data=get_json_body()
            )
        )
