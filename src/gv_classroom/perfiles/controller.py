from __future__ import annotations

from flask import Flask

from ..auth.session import with_session
from ..common.http import get_json_body, json_response
from ..common.validators import require_json_object
from ..container import Container
from ..core.permissions import Permission


def register(app: Flask, container: Container) -> None:
    @app.route("/api/perfiles", methods=["GET"], endpoint="list_perfiles")
    def list_perfiles():
        return json_response(container.perfil_service.list_perfiles())

    @app.route("/api/permisos", methods=["GET"], endpoint="list_permisos")
    def list_permisos():
        return json_response(container.perfil_service.list_permisos())

    @app.route("/api/perfiles", methods=["POST"], endpoint="create_perfil")
    @with_session(container.tokens)
    def create_perfil(auth):
        actor = container.permission_service.require(auth, Permission.GESTIONAR_PERFILES)
        data = require_json_object(get_json_body())
        return json_response(container.perfil_service.create_perfil(actor=actor, data=data), 201)

    @app.route("/api/perfiles/<perfil_id>", methods=["PATCH"], endpoint="update_perfil")
    @with_session(container.tokens)
    def update_perfil(perfil_id: str, auth):
        actor = container.permission_service.require(auth, Permission.GESTIONAR_PERFILES)
        data = require_json_object(get_json_body())
        return json_response(container.perfil_service.update_perfil(actor=actor, perfil_id=perfil_id, data=data))

    @app.route("/api/perfiles/<perfil_id>/permisos-catalogo", methods=["GET"], endpoint="perfil_linked_permisos")
    def perfil_linked_permisos(perfil_id: str):
        return json_response(container.perfil_service.linked_permisos(perfil_id))

    @app.route("/api/perfiles/<perfil_id>/sincronizar", methods=["POST"], endpoint="sync_perfil_permisos")
    @with_session(container.tokens)
    def sync_perfil_permisos(perfil_id: str, auth):
        actor = container.permission_service.require(auth, Permission.GESTIONAR_PERFILES)
        return json_response(container.perfil_service.sync_join_table(actor=actor, perfil_id=perfil_id))
