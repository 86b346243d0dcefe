from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import get_json_body, json_response
from ..common.validators import require_json_object
from ..container import Container
from ..core.permissions import Permission
from .service import parse_estado


def register(app: Flask, container: Container) -> None:
    @app.route("/api/marcajes", methods=["GET"], endpoint="list_marcajes")
    def list_marcajes():
        return json_response(
            container.marcaje_service.list_marcajes(
                clase_id=request.args.get("claseId"),
                alumno_id=request.args.get("alumnoId"),
            )
        )

    @app.route("/api/marcajes", methods=["POST"], endpoint="create_marcaje")
    @with_session(container.tokens)
    def create_marcaje(auth):
        actor = container.permission_service.require(auth, Permission.EDITAR_ASISTENCIA)
        data = require_json_object(get_json_body())
        return json_response(container.marcaje_service.create_manual(actor=actor, data=data), 201)

    @app.route("/api/marcajes/<marcaje_id>", methods=["PATCH"], endpoint="update_marcaje")
    @with_session(container.tokens)
    def update_marcaje(marcaje_id: str, auth):
        # order matters: 401, then 400, then 403, then 404
        auth.require()
        data = get_json_body()
        estado = parse_estado(data.get("estado") if isinstance(data, dict) else None)
        actor = container.permission_service.require(
            auth, Permission.EDITAR_ASISTENCIA, message="No tiene permiso para editar asistencia"
        )
        return json_response(
            container.marcaje_service.update_status(actor=actor, marcaje_id=marcaje_id, estado=estado)
        )
