from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..audit.service import AuditTrail
from ..clases.repository import ClaseRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import ENTITY_MARCAJE
from ..core.enums import AuditAction, EstadoMarcaje, Role, TipoMarcaje
from ..core.exceptions import NotFoundError
from ..users.model import PersonaResumen, Usuario
from ..users.repository import UserRepository
from .model import Marcaje
from .repository import MarcajeRepository

logger = logging.getLogger(__name__)


def parse_estado(value: Any) -> EstadoMarcaje:
    return require_enum(value, EstadoMarcaje, "estado")


def _before_snapshot(m: Marcaje) -> dict:
    return {
        "id": m.id,
        "claseId": m.clase_id,
        "alumnoId": m.alumno_id,
        "alumnoNombre": m.alumno.nombre if m.alumno else None,
        "alumnoRut": m.alumno.rut if m.alumno else None,
        "claseAsignatura": m.clase_asignatura,
        "estado": m.estado.value,
        "tipoMarcaje": m.tipo_marcaje.value,
        "modificadoPor": m.modificado_por,
        "fechaHora": m.fecha_hora.isoformat() if hasattr(m.fecha_hora, "isoformat") else m.fecha_hora,
    }


def _after_snapshot(m: Marcaje, actor: Usuario) -> dict:
    return {
        "id": m.id,
        "claseId": m.clase_id,
        "alumnoId": m.alumno_id,
        "alumnoNombre": m.alumno.nombre if m.alumno else None,
        "alumnoRut": m.alumno.rut if m.alumno else None,
        "estado": m.estado.value,
        "tipoMarcaje": m.tipo_marcaje.value,
        "modificadoPor": actor.nombre,
        "modificadoPorId": actor.id,
    }


class MarcajeService:
    """Use case: read and edit attendance records.

    Every edit leaves exactly one audit row. The update and the audit insert
    run as separate statements; concurrent edits resolve last-write-wins.
    """

    def __init__(self, marcajes: MarcajeRepository, users: UserRepository, clases: ClaseRepository, audit: AuditTrail):
        self._marcajes = marcajes
        self._users = users
        self._clases = clases
        self._audit = audit

    def list_marcajes(self, *, clase_id: Optional[str] = None, alumno_id: Optional[str] = None) -> Sequence[Marcaje]:
        return self._marcajes.list_marcajes(clase_id=clase_id or None, alumno_id=alumno_id or None)

    def get(self, marcaje_id: str) -> Marcaje:
        marcaje = self._marcajes.get_by_id(marcaje_id)
        if not marcaje:
            raise NotFoundError("Marcaje no encontrado")
        return marcaje

    def update_status(self, *, actor: Usuario, marcaje_id: str, estado: EstadoMarcaje) -> Marcaje:
        before = self.get(marcaje_id)

        self._marcajes.update_status(
            marcaje_id, estado=estado, tipo_marcaje=TipoMarcaje.MANUAL, modificado_por=actor.id
        )
        after = replace(before, estado=estado, tipo_marcaje=TipoMarcaje.MANUAL, modificado_por=actor.id)
        logger.info("Marcaje %s: %s -> %s por %s", marcaje_id, before.estado.value, estado.value, actor.id)

        # audit straight after the UPDATE; nothing may fail in between
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.UPDATE,
            entity=ENTITY_MARCAJE,
            entity_id=marcaje_id,
            before=_before_snapshot(before),
            after=_after_snapshot(after, actor),
        )
        return self._marcajes.get_by_id(marcaje_id) or after

    def create_manual(self, *, actor: Usuario, data: dict) -> Marcaje:
        clase_id = require_non_empty(data.get("claseId"), "claseId")
        alumno_id = require_non_empty(data.get("alumnoId"), "alumnoId")
        estado = parse_estado(data.get("estado"))
        tipo = require_enum(data.get("tipoMarcaje") or TipoMarcaje.MANUAL.value, TipoMarcaje, "tipoMarcaje")

        if not self._clases.get_detail(clase_id):
            raise NotFoundError("Clase no encontrada")
        alumno = self._users.get_by_id(alumno_id)
        if not alumno or alumno.tipo != Role.ALUMNO:
            raise NotFoundError("Alumno no encontrado")

        marcaje_id = self._marcajes.create(
            clase_id=clase_id,
            alumno_id=alumno_id,
            estado=estado,
            tipo_marcaje=tipo,
            modificado_por=actor.id,
        )
        created = Marcaje(
            id=marcaje_id,
            clase_id=clase_id,
            alumno_id=alumno_id,
            fecha_hora=now_local(),
            estado=estado,
            tipo_marcaje=tipo,
            modificado_por=actor.id,
            alumno=PersonaResumen(id=alumno.id, nombre=alumno.nombre, rut=alumno.rut, email=alumno.email),
        )
        self._audit.record(
            actor_id=actor.id,
            action=AuditAction.CREATE,
            entity=ENTITY_MARCAJE,
            entity_id=marcaje_id,
            before=None,
            after=_after_snapshot(created, actor),
        )
        return self._marcajes.get_by_id(marcaje_id) or created
