from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import parse_query_date
from ..core.enums import EstadoClase
from ..marcajes.model import Marcaje
from ..sedes.model import Sala
from ..users.model import PersonaResumen


@dataclass(frozen=True)
class Inscripcion:
    id: str
    clase_id: str
    alumno_id: str
    created_at: Optional[datetime] = None
    alumno: Optional[PersonaResumen] = None


@dataclass(frozen=True)
class Clase:
    """Sesion de clase programada.

    Embedded collections are filled only by the queries that need them.
    """

    id: str
    codigo: str
    asignatura: str
    profesor_id: str
    sala_id: str
    fecha: date
    hora_inicio: str
    hora_fin: str
    estado: EstadoClase = EstadoClase.ACTIVA
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profesor: Optional[PersonaResumen] = None
    sala: Optional[Sala] = None
    inscripciones: Tuple[Inscripcion, ...] = ()
    marcajes: Tuple[Marcaje, ...] = ()


@dataclass(frozen=True)
class ClaseResumen:
    """Row of the dashboard's recent classes widget."""

    id: str
    asignatura: str
    profesor: str
    sala: str
    hora_inicio: str
    hora_fin: str
    estado: EstadoClase


@dataclass(frozen=True)
class ClaseFilter:
    """List criteria for /api/clases.

    ``fecha`` wins over the ``desde``/``hasta`` range, and the range only
    applies when both ends are present.
    """

    profesor_id: Optional[str] = None
    sala_id: Optional[str] = None
    estado: Optional[str] = None
    fecha: Optional[date] = None
    desde: Optional[date] = None
    hasta: Optional[date] = None

    @classmethod
    def from_args(cls, args) -> "ClaseFilter":
        return cls(
            profesor_id=args.get("profesorId") or None,
            sala_id=args.get("salaId") or None,
            estado=(args.get("estado") or "").upper() or None,
            fecha=parse_query_date(args.get("fecha"), "fecha"),
            desde=parse_query_date(args.get("desde"), "desde"),
            hasta=parse_query_date(args.get("hasta"), "hasta"),
        )

    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        if self.fecha:
            return self.fecha, self.fecha
        if self.desde and self.hasta:
            return self.desde, self.hasta
        return None, None
