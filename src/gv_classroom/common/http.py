from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


def to_json(value: Any) -> Any:
    """Convert domain objects into JSON-ready structures.

    Dataclass fields are emitted in camelCase; fields declared with
    ``metadata={"serialize": False}`` (password hashes) are skipped.
    """

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {}
        for f in dataclasses.fields(value):
            if not f.metadata.get("serialize", True):
                continue
            out[camel(f.name)] = to_json(getattr(value, f.name))
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    return value


def json_response(value: Any, status: int = 200):
    return jsonify(to_json(value)), status


def get_json_body() -> Any:
    return request.get_json(silent=True)


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions into ``{"error", "details"?}`` JSON responses.

    Every error is logged before it reaches the client.
    """

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = int(getattr(exc, "status_code", 500))
        if status >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.path, status, exc, exc_info=exc)
        else:
            logger.warning("%s %s -> %s: %s", request.method, request.path, status, exc)
        body: dict[str, Any] = {"error": str(exc)}
        details = getattr(exc, "details", None)
        if details:
            body["details"] = details
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        logger.warning("%s %s -> %s", request.method, request.path, exc.code)
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("%s %s -> 500", request.method, request.path)
        return jsonify({"error": INTERNAL_ERROR_MESSAGE}), 500
