from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

from .constants import PERMISSION_WILDCARD
from .enums import Role

logger = logging.getLogger(__name__)


class Permission(str, Enum):
    """Closed set of permission codes a perfil can grant."""

    VER_DASHBOARD = "ver_dashboard"
    VER_CALENDARIO_DOCENTE = "ver_calendario_docente"
    VER_MI_CALENDARIO = "ver_mi_calendario"
    EDITAR_ASISTENCIA = "editar_asistencia"
    VER_SALAS = "ver_salas"
    VER_DISPOSITIVOS = "ver_dispositivos"
    HOMOLOGAR_DISPOSITIVOS = "homologar_dispositivos"
    VER_USUARIOS = "ver_usuarios"
    EDITAR_USUARIOS = "editar_usuarios"
    CREAR_USUARIOS = "crear_usuarios"
    VER_HISTORIAL_ERRORES = "ver_historial_errores"
    REPORTAR_ERRORES = "reportar_errores"
    VER_HISTORIAL_DISPOSITIVOS = "ver_historial_dispositivos"
    GESTIONAR_PERFILES = "gestionar_perfiles"
    EXPORTAR_REPORTES = "exportar_reportes"
    VER_AUDITORIA = "ver_auditoria"


_BY_CODE = {p.value: p for p in Permission}


@dataclass(frozen=True)
class PermissionSet:
    """Parsed form of a perfil's serialized permission list.

    Parsing happens once; anything malformed degrades to an empty set so that
    checks fail closed. Codes outside the closed set are dropped.
    """

    granted: FrozenSet[Permission] = frozenset()
    wildcard: bool = False

    @classmethod
    def parse(cls, raw: Optional[str]) -> "PermissionSet":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Lista de permisos ilegible, se deniega todo")
            return cls()
        if not isinstance(data, list):
            logger.warning("Lista de permisos no es un arreglo, se deniega todo")
            return cls()
        return cls.from_codes(data)

    @classmethod
    def from_codes(cls, codes: Iterable[Any]) -> "PermissionSet":
        granted = set()
        wildcard = False
        for code in codes:
            if not isinstance(code, str):
                continue
            if code == PERMISSION_WILDCARD:
                wildcard = True
            elif code in _BY_CODE:
                granted.add(_BY_CODE[code])
            else:
                logger.debug("Permiso desconocido ignorado: %s", code)
        return cls(granted=frozenset(granted), wildcard=wildcard)

    def allows(self, permission: Permission) -> bool:
        return self.wildcard or permission in self.granted

    def codes(self) -> list[str]:
        out = [PERMISSION_WILDCARD] if self.wildcard else []
        out.extend(sorted(p.value for p in self.granted))
        return out

    def to_json(self) -> str:
        return json.dumps(self.codes())


def is_allowed(role: Optional[Role], permisos_raw: Optional[str], permission: Permission) -> bool:
    """Decide whether an actor may perform ``permission``.

    SUPER_ADMIN bypasses the perfil list. A missing perfil (``permisos_raw``
    is None) denies.
    """

    if role == Role.SUPER_ADMIN:
        return True
    return PermissionSet.parse(permisos_raw).allows(permission)


def unknown_codes(codes: Iterable[Any]) -> list[str]:
    """Codes an admin tried to store that are not part of the closed set."""

    out = []
    for code in codes:
        if not isinstance(code, str) or (code != PERMISSION_WILDCARD and code not in _BY_CODE):
            out.append(str(code))
    return out
