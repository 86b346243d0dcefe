"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_DAYS = 7
DEFAULT_TIMEZONE = "America/Santiago"
MIN_PASSWORD_LENGTH = 6
RECENT_CLASSES_LIMIT = 5
DEFAULT_LIST_LIMIT = 500

PERMISSION_WILDCARD = "*"

ENTITY_MARCAJE = "Marcaje"
ENTITY_USUARIO = "Usuario"
ENTITY_PERFIL = "Perfil"
ENTITY_INCIDENCIA = "IncidenciaDispositivo"
