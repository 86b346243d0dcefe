from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ReporteError, ReporteFilter


class ReporteRepository(Protocol):
    def list_reportes(self, criteria: ReporteFilter) -> Sequence[ReporteError]:
        raise NotImplementedError

    def get_by_id(self, reporte_id: str) -> Optional[ReporteError]:
        raise NotImplementedError

    def create(self, *, profesor_id: str, sala_id: Optional[str], sede_id: Optional[str], comentario: str) -> str:
        raise NotImplementedError
