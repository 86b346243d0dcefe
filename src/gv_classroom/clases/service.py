from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_query_date
from ..core.enums import EstadoClase
from ..core.exceptions import NotFoundError
from .model import Clase, ClaseFilter
from .repository import ClaseRepository


class ClaseService:
    def __init__(self, clases: ClaseRepository):
        self._clases = clases

    def list_clases(self, criteria: ClaseFilter) -> Sequence[Clase]:
        return self._clases.list_clases(criteria)

    def mis_clases(self, *, profesor_id: Optional[str], desde: Optional[str], hasta: Optional[str]) -> Sequence[Clase]:
        """Classes of the session's professor.

        An anonymous caller gets every class in the range.
        """

        criteria = ClaseFilter(
            profesor_id=profesor_id,
            desde=parse_query_date(desde, "desde"),
            hasta=parse_query_date(hasta, "hasta"),
        )
        return self._clases.list_clases(criteria, with_marcajes=False)

    def clases_alumno(self, *, alumno_id: Optional[str], desde: Optional[str], hasta: Optional[str]) -> Sequence[Clase]:
        if not alumno_id:
            return []
        d1 = parse_query_date(desde, "desde")
        d2 = parse_query_date(hasta, "hasta")
        if not (d1 and d2):
            d1 = d2 = None
        return self._clases.list_for_alumno(alumno_id, desde=d1, hasta=d2)

    def desactivadas(self, *, sala_id: Optional[str], fecha: Optional[str]) -> Sequence[Clase]:
        criteria = ClaseFilter(
            sala_id=sala_id,
            estado=EstadoClase.CANCELADA.value,
            fecha=parse_query_date(fecha, "fecha"),
        )
        return self._clases.list_clases(criteria, newest_first=True, with_marcajes=False)

    def get_detail(self, clase_id: str) -> Clase:
        clase = self._clases.get_detail(clase_id)
        if not clase:
            raise NotFoundError("Clase no encontrada")
        return clase

    def count_on(self, day: date) -> int:
        return self._clases.count_on(day)
