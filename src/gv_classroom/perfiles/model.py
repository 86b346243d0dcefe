from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.permissions import PermissionSet


@dataclass(frozen=True)
class Perfil:
    """Bundle of permission codes assignable to a user.

    ``permisos`` is the serialized JSON array stored in the row; it is the
    representation consulted when authorizing.
    """

    id: str
    nombre: str
    descripcion: Optional[str]
    permisos: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def permission_set(self) -> PermissionSet:
        return PermissionSet.parse(self.permisos)


@dataclass(frozen=True)
class Permiso:
    """Row of the normalized permission catalog (perfil_permisos join)."""

    id: str
    codigo: str
    nombre: str
    modulo: str
