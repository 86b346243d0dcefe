from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _fail(field_name: str, message: str) -> ValidationError:
    return ValidationError(f"{field_name}: {message}", details=[{"path": field_name, "message": message}])


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _fail(field_name, "es requerido")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise _fail(field_name, f"debe tener al menos {min_len} caracteres")
    return value


def optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _fail(field_name, "debe ser texto")
    return value.strip() or None


def optional_email(value: Any, field_name: str = "email") -> Optional[str]:
    email = optional_str(value, field_name)
    if email and not _EMAIL_RE.match(email):
        raise _fail(field_name, "email invalido")
    return email


def optional_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise _fail(field_name, "debe ser booleano")
    return value


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    """Parse ``value`` into ``enum_cls`` or fail listing the allowed values."""

    allowed = [m.value for m in enum_cls]
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise ValidationError(
        f"{field_name} invalido. Valores permitidos: {', '.join(allowed)}",
        details=[{"path": field_name, "message": f"Valores permitidos: {', '.join(allowed)}", "allowed": allowed}],
    )


def require_json_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Datos invalidos", details=[{"path": "", "message": "Se esperaba un objeto JSON"}])
    return payload
