from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional, Sequence

from ..audit.service import AuditTrail
from ..common.validators import require_non_empty
from ..core.constants import ENTITY_INCIDENCIA
from ..core.enums import AuditAction, EstadoResolucion, RehomologationPolicy
from ..core.exceptions import ConflictError, NotFoundError
from ..sedes.repository import SedeRepository
from .model import (
    Dispositivo,
    DispositivoFilter,
    HistorialDispositivo,
    IncidenciaDispositivo,
    IncidenciaFilter,
)
from .repository import DispositivoRepository

logger = logging.getLogger(__name__)

ACCION_HOMOLOGACION = "homologacion"


class DispositivoService:
    """Use case: monitor devices and homologate their incidents."""

    def __init__(
        self,
        dispositivos: DispositivoRepository,
        sedes: SedeRepository,
        audit: AuditTrail,
        *,
        policy: RehomologationPolicy = RehomologationPolicy.OVERWRITE,
    ):
        self._dispositivos = dispositivos
        self._sedes = sedes
        self._audit = audit
        self._policy = policy

    def list_dispositivos(self, criteria: DispositivoFilter) -> Sequence[Dispositivo]:
        return self._dispositivos.list_dispositivos(criteria)

    def list_incidencias(self, criteria: IncidenciaFilter) -> Sequence[IncidenciaDispositivo]:
        return self._dispositivos.list_incidencias(criteria)

    def historial_incidencias(self, criteria: IncidenciaFilter) -> Sequence[IncidenciaDispositivo]:
        # the history view ignores the estado filter and requires both ends of the range
        if not (criteria.desde and criteria.hasta):
            criteria = IncidenciaFilter()
        else:
            criteria = IncidenciaFilter(desde=criteria.desde, hasta=criteria.hasta)
        return self._dispositivos.list_incidencias(criteria)

    def historial_dispositivo(self, dispositivo_id: str) -> Sequence[HistorialDispositivo]:
        if not self._dispositivos.get_dispositivo(dispositivo_id):
            raise NotFoundError("Dispositivo no encontrado")
        return self._dispositivos.list_historial(dispositivo_id)

    def homologar(self, *, actor_id: Optional[str], incidencia_id: str, data: Any) -> IncidenciaDispositivo:
        """Resolve an incident by pointing it at a known sede and sala.

        Nothing is written when the sede, sala or incident does not exist.
        """

        data = data if isinstance(data, dict) else {}
        sede = self._sedes.get_sede(require_non_empty(data.get("sedeId"), "sedeId"))
        if not sede:
            raise NotFoundError("Sede o sala no encontrada")
        sala = self._sedes.get_sala(require_non_empty(data.get("salaId"), "salaId"))
        if not sala:
            raise NotFoundError("Sede o sala no encontrada")

        before = self._dispositivos.get_incidencia(incidencia_id)
        if not before:
            raise NotFoundError("Incidencia no encontrada")

        if before.estado_resolucion == EstadoResolucion.RESUELTO:
            if self._policy == RehomologationPolicy.REJECT:
                raise ConflictError("La incidencia ya fue homologada")
            if self._policy == RehomologationPolicy.IDEMPOTENT:
                logger.info("Incidencia %s ya resuelta; se devuelve sin cambios", incidencia_id)
                return before

        self._dispositivos.resolve_incidencia(incidencia_id, sede_homologada=sede.nombre, sala_homologada=sala.nombre)
        after = replace(
            before,
            sede_homologada=sede.nombre,
            sala_homologada=sala.nombre,
            estado_resolucion=EstadoResolucion.RESUELTO,
        )
        logger.info("Incidencia %s homologada a %s / %s", incidencia_id, sede.nombre, sala.nombre)

        self._audit.record(
            actor_id=actor_id,
            action=AuditAction.UPDATE,
            entity=ENTITY_INCIDENCIA,
            entity_id=incidencia_id,
            before=before.snapshot(),
            after=after.snapshot(),
        )
        self._dispositivos.append_historial(
            dispositivo_id=before.dispositivo_id,
            accion=ACCION_HOMOLOGACION,
            descripcion=f"Homologado a {sede.nombre} / {sala.nombre}",
            sede_anterior=before.sede_homologada or before.sede_original,
            sala_anterior=before.sala_homologada or before.sala_original,
            sede_nueva=sede.nombre,
            sala_nueva=sala.nombre,
            estado_anterior=before.estado_resolucion.value,
            estado_nuevo=after.estado_resolucion.value,
            actor_id=actor_id,
        )
        return self._dispositivos.get_incidencia(incidencia_id) or after

    def count_dispositivos(self, **kwargs) -> int:
        return self._dispositivos.count_dispositivos(**kwargs)

    def count_incidencias(self, **kwargs) -> int:
        return self._dispositivos.count_incidencias(**kwargs)
