from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from ..audit.service import AuditTrail
from ..common.validators import optional_str, require_non_empty
from ..core.constants import ENTITY_PERFIL
from ..core.enums import AuditAction
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import Permission, PermissionSet, unknown_codes
from ..users.model import Usuario
from .model import Perfil, Permiso
from .repository import PerfilRepository


def parse_permisos_input(value: Any) -> str:
    """Accept a list of codes or its JSON string; return the normalized JSON.

    Unlike reads (which ignore unknown codes), writes reject them so an admin
    notices a typo.
    """

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise ValidationError("permisos: JSON invalido", details=[{"path": "permisos", "message": "JSON invalido"}])
    if not isinstance(value, list):
        raise ValidationError(
            "permisos: se esperaba una lista", details=[{"path": "permisos", "message": "se esperaba una lista"}]
        )
    bad = unknown_codes(value)
    if bad:
        raise ValidationError(
            f"permisos: codigos desconocidos {', '.join(bad)}",
            details=[{"path": "permisos", "message": f"codigos desconocidos: {', '.join(bad)}"}],
        )
    return PermissionSet.from_codes(value).to_json()


def _snapshot(p: Perfil) -> dict:
    return {"id": p.id, "nombre": p.nombre, "descripcion": p.descripcion, "permisos": p.permisos}


class PerfilService:
    def __init__(self, perfiles: PerfilRepository, audit: AuditTrail):
        self._perfiles = perfiles
        self._audit = audit

    def list_perfiles(self) -> Sequence[Perfil]:
        return self._perfiles.list_all()

    def list_permisos(self) -> Sequence[Permiso]:
        return self._perfiles.list_permisos()

    def get_perfil(self, perfil_id: str) -> Perfil:
        perfil = self._perfiles.get_by_id(perfil_id)
        if not perfil:
            raise NotFoundError("Perfil no encontrado")
        return perfil

    def create_perfil(self, *, actor: Usuario, data: dict) -> Perfil:
        nombre = require_non_empty(data.get("nombre"), "nombre")
        descripcion = optional_str(data.get("descripcion"), "descripcion")
        if "permisos" not in data:
            raise ValidationError("permisos: es requerido", details=[{"path": "permisos", "message": "es requerido"}])
        permisos = parse_permisos_input(data.get("permisos"))

        perfil_id = self._perfiles.create(nombre=nombre, descripcion=descripcion, permisos=permisos)
        created = self.get_perfil(perfil_id)
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.CREATE,
            entity=ENTITY_PERFIL,
            entity_id=perfil_id,
            before=None,
            after=_snapshot(created),
        )
        return created

    def update_perfil(self, *, actor: Usuario, perfil_id: str, data: dict) -> Perfil:
        before = self.get_perfil(perfil_id)
        changes: dict[str, Optional[str]] = {}
        if "nombre" in data:
            changes["nombre"] = require_non_empty(data.get("nombre"), "nombre")
        if "descripcion" in data:
            changes["descripcion"] = optional_str(data.get("descripcion"), "descripcion")
        if "permisos" in data:
            changes["permisos"] = parse_permisos_input(data.get("permisos"))

        if changes:
            self._perfiles.update(perfil_id, changes=changes)
        after = self.get_perfil(perfil_id)
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.UPDATE,
            entity=ENTITY_PERFIL,
            entity_id=perfil_id,
            before=_snapshot(before),
            after=_snapshot(after),
        )
        return after

    def linked_permisos(self, perfil_id: str) -> Sequence[Permiso]:
        self.get_perfil(perfil_id)
        return self._perfiles.list_linked_permisos(perfil_id)

    def sync_join_table(self, *, actor: Usuario, perfil_id: str) -> Sequence[Permiso]:
        """Rewrite perfil_permisos from the JSON column (wildcard = every code).

        Authorization only reads the JSON column; this keeps the normalized
        copy from drifting when an admin asks for it.
        """

        perfil = self.get_perfil(perfil_id)
        perms = perfil.permission_set
        codes = [p.value for p in Permission] if perms.wildcard else sorted(p.value for p in perms.granted)
        before = [p.codigo for p in self._perfiles.list_linked_permisos(perfil_id)]
        self._perfiles.replace_linked_permisos(perfil_id, codes)
        linked = self._perfiles.list_linked_permisos(perfil_id)
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.UPDATE,
            entity=ENTITY_PERFIL,
            entity_id=perfil_id,
            before={"perfilPermisos": before},
            after={"perfilPermisos": [p.codigo for p in linked]},
        )
        return linked
