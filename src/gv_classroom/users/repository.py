from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Usuario


class UserRepository(Protocol):
    """Repository interface for Usuario.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[Usuario]:
        """Usuario with its perfil and sede embedded."""

        raise NotImplementedError

    def get_by_rut(self, rut: str) -> Optional[Usuario]:
        raise NotImplementedError

    def list_users(self, *, tipo: Optional[Role] = None) -> Sequence[Usuario]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        rut: str,
        nombre: str,
        email: Optional[str],
        password_hash: str,
        tipo: Role,
        perfil_id: Optional[str],
        sede_id: Optional[str],
        timezone: str,
        activo: bool,
    ) -> str:
        raise NotImplementedError

    def update_user(self, user_id: str, *, changes: dict) -> bool:
        """Apply a partial update; keys are column names."""

        raise NotImplementedError

    def count(self, *, activo: Optional[bool] = None) -> int:
        raise NotImplementedError
