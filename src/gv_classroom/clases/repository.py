from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Clase, ClaseFilter


class ClaseRepository(Protocol):
    def list_clases(
        self, criteria: ClaseFilter, *, newest_first: bool = False, with_marcajes: bool = True
    ) -> Sequence[Clase]:
        """Classes matching ``criteria`` embedding profesor, sala+sede and inscripciones."""

        raise NotImplementedError

    def list_for_alumno(
        self, alumno_id: str, *, desde: Optional[date] = None, hasta: Optional[date] = None
    ) -> Sequence[Clase]:
        raise NotImplementedError

    def get_detail(self, clase_id: str) -> Optional[Clase]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Clase]:
        raise NotImplementedError

    def count_on(self, day: date) -> int:
        raise NotImplementedError
