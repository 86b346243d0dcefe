from __future__ import annotations

from flask import Flask, request

from ..auth.session import with_session
from ..common.http import json_response
from ..container import Container
from ..core.permissions import Permission


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit-log", methods=["GET"], endpoint="list_audit_log")
    @with_session(container.tokens)
    def list_audit_log(auth):
        container.permission_service.require(auth, Permission.VER_AUDITORIA)
        return json_response(
            container.audit_trail.list_entries(
                entity=request.args.get("entity") or None,
                entity_id=request.args.get("entityId") or None,
            )
        )
