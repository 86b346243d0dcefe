from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EstadoMarcaje, TipoMarcaje
from ..users.model import PersonaResumen


@dataclass(frozen=True)
class Marcaje:
    """Registro de asistencia de un alumno en una clase.

    Mutated only through the attendance-edit workflow; never deleted.
    """

    id: str
    clase_id: str
    alumno_id: str
    fecha_hora: datetime
    estado: EstadoMarcaje
    tipo_marcaje: TipoMarcaje
    modificado_por: Optional[str] = None
    dispositivo_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    alumno: Optional[PersonaResumen] = None
    clase_asignatura: Optional[str] = None
    dispositivo_serial: Optional[str] = None
