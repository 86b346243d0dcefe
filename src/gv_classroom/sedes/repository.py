from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Sala, Sede


class SedeRepository(Protocol):
    def list_sedes(self) -> Sequence[Sede]:
        raise NotImplementedError

    def get_sede(self, sede_id: str) -> Optional[Sede]:
        raise NotImplementedError

    def list_salas(self, *, sede_id: Optional[str] = None) -> Sequence[Sala]:
        """Salas ordered by nombre, each embedding its sede."""

        raise NotImplementedError

    def get_sala(self, sala_id: str) -> Optional[Sala]:
        raise NotImplementedError
