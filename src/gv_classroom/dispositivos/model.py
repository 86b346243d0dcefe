from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_query_date
from ..core.enums import EstadoDispositivo, EstadoResolucion, TipoDispositivo
from ..sedes.model import Sala, Sede


@dataclass(frozen=True)
class Dispositivo:
    """Tablet o PDA instalada en una sala."""

    id: str
    serial_number: str
    tipo: TipoDispositivo
    sala_id: Optional[str]
    sede_id: Optional[str]
    version_app: Optional[str] = None
    bateria: Optional[int] = None
    estado_conexion: EstadoDispositivo = EstadoDispositivo.DESCONECTADO
    ultima_conexion: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    sala: Optional[Sala] = None
    sede: Optional[Sede] = None


@dataclass(frozen=True)
class IncidenciaDispositivo:
    """Device reporting a sede/sala that does not match its registration.

    Homologation copies the display names of the chosen sede and sala into
    ``sede_homologada``/``sala_homologada`` and marks the incident RESUELTO.
    """

    id: str
    dispositivo_id: str
    tipo_incidencia: str
    descripcion: Optional[str]
    sede_original: Optional[str]
    sala_original: Optional[str]
    sede_homologada: Optional[str] = None
    sala_homologada: Optional[str] = None
    estado_resolucion: EstadoResolucion = EstadoResolucion.PENDIENTE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    dispositivo: Optional[Dispositivo] = None

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "dispositivoId": self.dispositivo_id,
            "sedeOriginal": self.sede_original,
            "salaOriginal": self.sala_original,
            "sedeHomologada": self.sede_homologada,
            "salaHomologada": self.sala_homologada,
            "estadoResolucion": self.estado_resolucion.value,
        }


@dataclass(frozen=True)
class HistorialDispositivo:
    id: str
    dispositivo_id: str
    accion: str
    descripcion: Optional[str] = None
    sede_anterior: Optional[str] = None
    sala_anterior: Optional[str] = None
    sede_nueva: Optional[str] = None
    sala_nueva: Optional[str] = None
    estado_anterior: Optional[str] = None
    estado_nuevo: Optional[str] = None
    actor_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DispositivoFilter:
    sala_id: Optional[str] = None
    sede_id: Optional[str] = None
    estado: Optional[EstadoDispositivo] = None

    @classmethod
    def from_args(cls, args) -> "DispositivoFilter":
        estado = (args.get("estado") or "").strip().upper()
        return cls(
            sala_id=args.get("salaId") or None,
            sede_id=args.get("sedeId") or None,
            estado=EstadoDispositivo(estado) if estado in EstadoDispositivo.__members__ else None,
        )


@dataclass(frozen=True)
class IncidenciaFilter:
    """``desde``/``hasta`` bound the creation date and apply only together."""

    estado: Optional[EstadoResolucion] = None
    desde: Optional[date] = None
    hasta: Optional[date] = None

    @classmethod
    def from_args(cls, args) -> "IncidenciaFilter":
        estado = (args.get("estado") or "").strip().upper()
        return cls(
            estado=EstadoResolucion(estado) if estado in EstadoResolucion.__members__ else None,
            desde=parse_query_date(args.get("desde"), "desde"),
            hasta=parse_query_date(args.get("hasta"), "hasta"),
        )
