from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EstadoMarcaje, TipoMarcaje
from .model import Marcaje


class MarcajeRepository(Protocol):
    def get_by_id(self, marcaje_id: str) -> Optional[Marcaje]:
        """Marcaje with alumno and clase asignatura embedded."""

        raise NotImplementedError

    def list_marcajes(
        self, *, clase_id: Optional[str] = None, alumno_id: Optional[str] = None
    ) -> Sequence[Marcaje]:
        raise NotImplementedError

    def create(
        self,
        *,
        clase_id: str,
        alumno_id: str,
        estado: EstadoMarcaje,
        tipo_marcaje: TipoMarcaje,
        modificado_por: Optional[str],
        dispositivo_id: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def update_status(
        self, marcaje_id: str, *, estado: EstadoMarcaje, tipo_marcaje: TipoMarcaje, modificado_por: str
    ) -> bool:
        raise NotImplementedError
