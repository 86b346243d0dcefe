from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Tipo de usuario usado para autorizacion."""

    SUPER_ADMIN = "SUPER_ADMIN"
    SOPORTE = "SOPORTE"
    PROFESOR = "PROFESOR"
    ALUMNO = "ALUMNO"
    VISUALIZADOR = "VISUALIZADOR"


class EstadoMarcaje(str, Enum):
    """Estado de asistencia de un alumno en una clase."""

    PRESENTE = "PRESENTE"
    AUSENTE = "AUSENTE"
    TARDANZA = "TARDANZA"
    JUSTIFICADO = "JUSTIFICADO"


class TipoMarcaje(str, Enum):
    AUTOMATICO = "AUTOMATICO"
    MANUAL = "MANUAL"


class EstadoClase(str, Enum):
    ACTIVA = "ACTIVA"
    CANCELADA = "CANCELADA"
    COMPLETADA = "COMPLETADA"


class EstadoDispositivo(str, Enum):
    CONECTADO = "CONECTADO"
    DESCONECTADO = "DESCONECTADO"
    ADVERTENCIA = "ADVERTENCIA"


class TipoDispositivo(str, Enum):
    TABLET = "TABLET"
    PDA = "PDA"


class EstadoResolucion(str, Enum):
    """Flujo de resolucion de incidencias y reportes.

    PENDIENTE/EN_PROCESO -> RESUELTO es la unica transicion definida.
    """

    PENDIENTE = "PENDIENTE"
    EN_PROCESO = "EN_PROCESO"
    RESUELTO = "RESUELTO"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"


class RehomologationPolicy(str, Enum):
    """What to do when an already resolved incident is homologated again."""

    OVERWRITE = "overwrite"
    REJECT = "reject"
    IDEMPOTENT = "idempotent"
