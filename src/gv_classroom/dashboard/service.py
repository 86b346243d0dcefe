from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from ..clases.model import ClaseResumen
from ..clases.repository import ClaseRepository
from ..common.datetime_utils import now_local
from ..core.constants import RECENT_CLASSES_LIMIT
from ..core.enums import EstadoDispositivo, EstadoResolucion
from ..dispositivos.repository import DispositivoRepository
from ..users.repository import UserRepository

SIN_PROFESOR = "Sin profesor"
SIN_SALA = "Sin sala"


@dataclass(frozen=True)
class DashboardStats:
    total_usuarios: int
    usuarios_activos: int
    total_dispositivos: int
    dispositivos_conectados: int
    clases_hoy: int
    incidencias_pendientes: int


class DashboardService:
    """Use case: headline counters and recent classes for the landing page."""

    def __init__(
        self,
        users: UserRepository,
        clases: ClaseRepository,
        dispositivos: DispositivoRepository,
        clock: Optional[Callable] = None,
    ):
        self._users = users
        self._clases = clases
        self._dispositivos = dispositivos
        self._clock = clock or now_local

    def stats(self) -> DashboardStats:
        return DashboardStats(
            total_usuarios=self._users.count(),
            usuarios_activos=self._users.count(activo=True),
            total_dispositivos=self._dispositivos.count_dispositivos(),
            dispositivos_conectados=self._dispositivos.count_dispositivos(estado=EstadoDispositivo.CONECTADO),
            clases_hoy=self._clases.count_on(self._clock().date()),
            incidencias_pendientes=self._dispositivos.count_incidencias(estado=EstadoResolucion.PENDIENTE),
        )

    def clases_recientes(self) -> List[ClaseResumen]:
        return [
            ClaseResumen(
                id=c.id,
                asignatura=c.asignatura,
                profesor=c.profesor.nombre if c.profesor else SIN_PROFESOR,
                sala=c.sala.nombre if c.sala else SIN_SALA,
                hora_inicio=c.hora_inicio,
                hora_fin=c.hora_fin,
                estado=c.estado,
            )
            for c in self._clases.list_recent(RECENT_CLASSES_LIMIT)
        ]
