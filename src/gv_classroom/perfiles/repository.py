from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Perfil, Permiso


class PerfilRepository(Protocol):
    def list_all(self) -> Sequence[Perfil]:
        raise NotImplementedError

    def get_by_id(self, perfil_id: str) -> Optional[Perfil]:
        raise NotImplementedError

    def create(self, *, nombre: str, descripcion: Optional[str], permisos: str) -> str:
        raise NotImplementedError

    def update(self, perfil_id: str, *, changes: dict) -> bool:
        raise NotImplementedError

    def list_permisos(self) -> Sequence[Permiso]:
        raise NotImplementedError

    def list_linked_permisos(self, perfil_id: str) -> Sequence[Permiso]:
        """Permisos linked through the normalized join table."""

        raise NotImplementedError

    def replace_linked_permisos(self, perfil_id: str, codigos: Sequence[str]) -> int:
        raise NotImplementedError
