from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import get_json_body, json_response
from ..common.validators import require_json_object
from ..container import Container
from ..core.permissions import Permission


def register(app: Flask, container: Container) -> None:
    @app.route("/api/usuarios", methods=["GET"], endpoint="list_usuarios")
    def list_usuarios():
        return json_response(container.user_service.list_users(tipo=request.args.get("tipo")))

    @app.route("/api/usuarios", methods=["POST"], endpoint="create_usuario")
    @with_session(container.tokens)
    def create_usuario(auth):
        actor = container.permission_service.require(auth, Permission.CREAR_USUARIOS)
        data = require_json_object(get_json_body())
        return json_response(container.user_service.create_user(actor=actor, data=data), 201)

    @app.route("/api/usuarios/<user_id>", methods=["PATCH"], endpoint="update_usuario")
    @with_session(container.tokens)
    def update_usuario(user_id: str, auth):
        actor = container.permission_service.require(auth, Permission.EDITAR_USUARIOS)
        data = require_json_object(get_json_body())
        return json_response(container.user_service.update_user(actor=actor, user_id=user_id, data=data))
