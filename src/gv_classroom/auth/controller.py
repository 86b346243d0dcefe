from __future__ import annotations

from flask import Flask

from .session import with_session
from ..common.http import get_json_body, json_response
from ..common.validators import require_json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = require_json_object(get_json_body())
        result = container.auth_service.login(data.get("rut"), data.get("password"))
        return json_response({"user": result.user, "token": result.token})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @with_session(container.tokens)
    def me(auth):
        return json_response(container.permission_service.require_user(auth))
