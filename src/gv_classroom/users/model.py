from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import Role
from ..perfiles.model import Perfil
from ..sedes.model import Sede


@dataclass(frozen=True)
class Usuario:
    """Entidad de dominio: cuenta de usuario identificada por RUT.

    ``password_hash`` never leaves the server (excluded from serialization).
    """

    id: str
    rut: str
    nombre: str
    email: Optional[str]
    password_hash: str = field(repr=False, metadata={"serialize": False})
    tipo: Role = Role.ALUMNO
    perfil_id: Optional[str] = None
    sede_id: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    activo: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    perfil: Optional[Perfil] = None
    sede: Optional[Sede] = None

    def snapshot(self) -> dict:
        """Human-readable state for audit rows (no secrets)."""

        return {
            "id": self.id,
            "rut": self.rut,
            "nombre": self.nombre,
            "email": self.email,
            "tipo": self.tipo.value,
            "perfilId": self.perfil_id,
            "sedeId": self.sede_id,
            "timezone": self.timezone,
            "activo": self.activo,
        }


@dataclass(frozen=True)
class PersonaResumen:
    """Short embedded view of a user (profesor/alumno) in other resources."""

    id: str
    nombre: str
    rut: str
    email: Optional[str] = None
