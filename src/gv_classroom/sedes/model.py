from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_TIMEZONE


@dataclass(frozen=True)
class Sede:
    """Sede (campus) fisica de la institucion."""

    id: str
    codigo: str
    nombre: str
    timezone: str = DEFAULT_TIMEZONE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Sala:
    id: str
    codigo: str
    nombre: str
    sede_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    sede: Optional[Sede] = None
