from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_query_date
from ..core.enums import EstadoResolucion
from ..users.model import PersonaResumen


@dataclass(frozen=True)
class ReporteError:
    """Falla de hardware reportada por un profesor."""

    id: str
    profesor_id: str
    sala_id: Optional[str]
    sede_id: Optional[str]
    fecha: datetime
    comentario: str
    estado: EstadoResolucion = EstadoResolucion.PENDIENTE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profesor: Optional[PersonaResumen] = None


@dataclass(frozen=True)
class ReporteFilter:
    sede_id: Optional[str] = None
    desde: Optional[date] = None
    hasta: Optional[date] = None

    @classmethod
    def from_args(cls, args) -> "ReporteFilter":
        return cls(
            sede_id=args.get("sedeId") or None,
            desde=parse_query_date(args.get("desde"), "desde"),
            hasta=parse_query_date(args.get("hasta"), "hasta"),
        )
