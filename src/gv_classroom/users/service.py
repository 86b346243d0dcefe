from __future__ import annotations

from typing import Any, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..audit.service import AuditTrail
from ..common.validators import (
    optional_bool,
    optional_email,
    optional_str,
    require_enum,
    require_min_length,
    require_non_empty,
)
from ..core.constants import DEFAULT_TIMEZONE, ENTITY_USUARIO, MIN_PASSWORD_LENGTH
from ..core.enums import AuditAction, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..perfiles.repository import PerfilRepository
from ..sedes.repository import SedeRepository
from .model import Usuario
from .repository import UserRepository


def parse_role_filter(value: Optional[str]) -> Optional[Role]:
    """Case-insensitive role filter; unknown values mean "no filter"."""

    if not value:
        return None
    try:
        return Role(value.strip().upper())
    except ValueError:
        return None


class UserService:
    """Use case: manage users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        perfiles: PerfilRepository,
        sedes: SedeRepository,
        audit: AuditTrail,
    ):
        self._users = users
        self._perfiles = perfiles
        self._sedes = sedes
        self._audit = audit

    def list_users(self, *, tipo: Optional[str] = None) -> Sequence[Usuario]:
        return self._users.list_users(tipo=parse_role_filter(tipo))

    def get_user(self, user_id: str) -> Usuario:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado")
        return user

    def _check_refs(self, perfil_id: Optional[str], sede_id: Optional[str]) -> None:
        if perfil_id and not self._perfiles.get_by_id(perfil_id):
            raise ValidationError("perfilId: perfil inexistente", details=[{"path": "perfilId", "message": "perfil inexistente"}])
        if sede_id and not self._sedes.get_sede(sede_id):
            raise ValidationError("sedeId: sede inexistente", details=[{"path": "sedeId", "message": "sede inexistente"}])

    def create_user(self, *, actor: Usuario, data: dict) -> Usuario:
        rut = require_non_empty(data.get("rut"), "rut")
        nombre = require_non_empty(data.get("nombre"), "nombre")
        email = optional_email(data.get("email"))
        if not data.get("password"):
            raise ValidationError("Contrasena es requerida", details=[{"path": "password", "message": "es requerido"}])
        password = require_min_length(data.get("password"), "password", MIN_PASSWORD_LENGTH)
        tipo = require_enum(str(data.get("tipo") or "").upper(), Role, "tipo")
        perfil_id = optional_str(data.get("perfilId"), "perfilId")
        sede_id = optional_str(data.get("sedeId"), "sedeId")
        timezone = optional_str(data.get("timezone"), "timezone") or DEFAULT_TIMEZONE
        activo = optional_bool(data.get("activo"), "activo")

        self._check_refs(perfil_id, sede_id)
        if self._users.get_by_rut(rut):
            raise ConflictError("Ya existe un usuario con ese RUT")

        user_id = self._users.create_user(
            rut=rut,
            nombre=nombre,
            email=email,
            password_hash=generate_password_hash(password),
            tipo=tipo,
            perfil_id=perfil_id,
            sede_id=sede_id,
            timezone=timezone,
            activo=True if activo is None else activo,
        )
        created = self.get_user(user_id)
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.CREATE,
            entity=ENTITY_USUARIO,
            entity_id=user_id,
            before=None,
            after=created.snapshot(),
        )
        return created

    def update_user(self, *, actor: Usuario, user_id: str, data: dict) -> Usuario:
        before = self.get_user(user_id)
        changes: dict[str, Any] = {}

        if "rut" in data:
            changes["rut"] = require_non_empty(data.get("rut"), "rut")
            other = self._users.get_by_rut(changes["rut"])
            if other and other.id != user_id:
                raise ConflictError("Ya existe un usuario con ese RUT")
        if "nombre" in data:
            changes["nombre"] = require_non_empty(data.get("nombre"), "nombre")
        if "email" in data:
            changes["email"] = optional_email(data.get("email"))
        if data.get("password"):
            password = require_min_length(data.get("password"), "password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(password)
        if "tipo" in data:
            changes["tipo"] = require_enum(str(data.get("tipo") or "").upper(), Role, "tipo")
        if "perfilId" in data:
            changes["perfil_id"] = optional_str(data.get("perfilId"), "perfilId")
        if "sedeId" in data:
            changes["sede_id"] = optional_str(data.get("sedeId"), "sedeId")
        if "timezone" in data:
            changes["timezone"] = optional_str(data.get("timezone"), "timezone") or DEFAULT_TIMEZONE
        if "activo" in data:
            activo = optional_bool(data.get("activo"), "activo")
            if activo is not None:
                changes["activo"] = activo

        self._check_refs(changes.get("perfil_id"), changes.get("sede_id"))
        if changes:
            self._users.update_user(user_id, changes=changes)
        after = self.get_user(user_id)

        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.UPDATE,
            entity=ENTITY_USUARIO,
            entity_id=user_id,
            before=before.snapshot(),
            after=after.snapshot(),
        )
        return after
