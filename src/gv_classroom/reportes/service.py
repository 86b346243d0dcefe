from __future__ import annotations

import logging
from typing import Any, Sequence

from ..auth.session import AuthSession
from ..common.validators import optional_str, require_json_object, require_non_empty
from ..core.exceptions import NotFoundError
from .model import ReporteError, ReporteFilter
from .repository import ReporteRepository

logger = logging.getLogger(__name__)


class ReporteService:
    def __init__(self, reportes: ReporteRepository):
        self._reportes = reportes

    def list_reportes(self, criteria: ReporteFilter) -> Sequence[ReporteError]:
        return self._reportes.list_reportes(criteria)

    def create_reporte(self, *, auth: AuthSession, data: Any) -> ReporteError:
        # the payload is validated before the caller's identity is checked
        data = require_json_object(data)
        comentario = require_non_empty(data.get("comentario"), "comentario")
        sala_id = optional_str(data.get("salaId"), "salaId")
        sede_id = optional_str(data.get("sedeId"), "sedeId")

        payload = auth.require()
        reporte_id = self._reportes.create(
            profesor_id=payload.user_id, sala_id=sala_id, sede_id=sede_id, comentario=comentario
        )
        logger.info("Reporte de error %s creado por %s", reporte_id, payload.user_id)
        reporte = self._reportes.get_by_id(reporte_id)
        if not reporte:
            raise NotFoundError("Reporte no encontrado")
        return reporte
