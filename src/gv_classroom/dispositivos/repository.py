from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EstadoDispositivo, EstadoResolucion
from .model import (
    Dispositivo,
    DispositivoFilter,
    HistorialDispositivo,
    IncidenciaDispositivo,
    IncidenciaFilter,
)


class DispositivoRepository(Protocol):
    def list_dispositivos(self, criteria: DispositivoFilter) -> Sequence[Dispositivo]:
        """Devices ordered by serial number, embedding sala and sede."""

        raise NotImplementedError

    def get_dispositivo(self, dispositivo_id: str) -> Optional[Dispositivo]:
        raise NotImplementedError

    def count_dispositivos(self, *, estado: Optional[EstadoDispositivo] = None) -> int:
        raise NotImplementedError

    def list_incidencias(self, criteria: IncidenciaFilter) -> Sequence[IncidenciaDispositivo]:
        """Newest first, embedding the device with its sala and sede."""

        raise NotImplementedError

    def get_incidencia(self, incidencia_id: str) -> Optional[IncidenciaDispositivo]:
        raise NotImplementedError

    def count_incidencias(self, *, estado: Optional[EstadoResolucion] = None) -> int:
        raise NotImplementedError

    def resolve_incidencia(self, incidencia_id: str, *, sede_homologada: str, sala_homologada: str) -> bool:
        raise NotImplementedError

    def append_historial(
        self,
        *,
        dispositivo_id: str,
        accion: str,
        descripcion: Optional[str] = None,
        sede_anterior: Optional[str] = None,
        sala_anterior: Optional[str] = None,
        sede_nueva: Optional[str] = None,
        sala_nueva: Optional[str] = None,
        estado_anterior: Optional[str] = None,
        estado_nuevo: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def list_historial(self, dispositivo_id: str) -> Sequence[HistorialDispositivo]:
        raise NotImplementedError
