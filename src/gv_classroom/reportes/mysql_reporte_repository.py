from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EstadoResolucion
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..users.model import PersonaResumen
from .model import ReporteError, ReporteFilter
from .repository import ReporteRepository

_SELECT = """
    SELECT r.id, r.profesor_id, r.sala_id, r.sede_id, r.fecha, r.comentario, r.estado, r.created_at, r.updated_at,
           u.nombre AS profesor_nombre, u.rut AS profesor_rut, u.email AS profesor_email
    FROM reportes_error r
    LEFT JOIN usuarios u ON u.id = r.profesor_id
"""


def row_to_reporte(r: dict) -> ReporteError:
    profesor = None
    if r.get("profesor_nombre") is not None:
        profesor = PersonaResumen(
            id=r["profesor_id"], nombre=r["profesor_nombre"], rut=r["profesor_rut"], email=r.get("profesor_email")
        )
    return ReporteError(
        id=r["id"],
        profesor_id=r["profesor_id"],
        sala_id=r.get("sala_id"),
        sede_id=r.get("sede_id"),
        fecha=r["fecha"],
        comentario=r["comentario"],
        estado=EstadoResolucion(r["estado"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        profesor=profesor,
    )


class MySQLReporteRepository(ReporteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_reportes(self, criteria: ReporteFilter) -> Sequence[ReporteError]:
        where, params = (
            SqlFilter()
            .eq("r.sede_id", criteria.sede_id)
            .date_between("r.fecha", criteria.desde, criteria.hasta)
            .build()
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY r.created_at DESC", params)
            return [row_to_reporte(r) for r in fetchall(cur)]

    def get_by_id(self, reporte_id: str) -> Optional[ReporteError]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE r.id=%s", (reporte_id,))
            row = fetchone(cur)
            return row_to_reporte(row) if row else None

    def create(self, *, profesor_id: str, sala_id: Optional[str], sede_id: Optional[str], comentario: str) -> str:
        reporte_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reportes_error(id, profesor_id, sala_id, sede_id, fecha, comentario, estado,
                                           created_at, updated_at)
                VALUES(%s,%s,%s,%s,NOW(),%s,%s,NOW(),NOW())
                """,
                (reporte_id, profesor_id, sala_id, sede_id, comentario, EstadoResolucion.PENDIENTE.value),
            )
        return reporte_id
