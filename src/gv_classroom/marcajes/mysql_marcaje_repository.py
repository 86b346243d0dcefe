from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EstadoMarcaje, TipoMarcaje
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..users.model import PersonaResumen
from .model import Marcaje
from .repository import MarcajeRepository

MARCAJE_SELECT = """
    SELECT m.id, m.clase_id, m.alumno_id, m.fecha_hora, m.estado, m.tipo_marcaje, m.modificado_por,
           m.dispositivo_id, m.created_at, m.updated_at,
           a.nombre AS alumno_nombre, a.rut AS alumno_rut, a.email AS alumno_email,
           c.asignatura AS clase_asignatura,
           d.serial_number AS dispositivo_serial
    FROM marcajes m
    LEFT JOIN usuarios a ON a.id = m.alumno_id
    LEFT JOIN clases c ON c.id = m.clase_id
    LEFT JOIN dispositivos d ON d.id = m.dispositivo_id
"""


def row_to_marcaje(r: dict) -> Marcaje:
    alumno = None
    if r.get("alumno_nombre") is not None:
        alumno = PersonaResumen(
            id=r["alumno_id"], nombre=r["alumno_nombre"], rut=r["alumno_rut"], email=r.get("alumno_email")
        )
    return Marcaje(
        id=r["id"],
        clase_id=r["clase_id"],
        alumno_id=r["alumno_id"],
        fecha_hora=r["fecha_hora"],
        estado=EstadoMarcaje(r["estado"]),
        tipo_marcaje=TipoMarcaje(r["tipo_marcaje"]),
        modificado_por=r.get("modificado_por"),
        dispositivo_id=r.get("dispositivo_id"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        alumno=alumno,
        clase_asignatura=r.get("clase_asignatura"),
        dispositivo_serial=r.get("dispositivo_serial"),
    )


class MySQLMarcajeRepository(MarcajeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, marcaje_id: str) -> Optional[Marcaje]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{MARCAJE_SELECT} WHERE m.id=%s", (marcaje_id,))
            row = fetchone(cur)
            return row_to_marcaje(row) if row else None

    def list_marcajes(
        self, *, clase_id: Optional[str] = None, alumno_id: Optional[str] = None
    ) -> Sequence[Marcaje]:
        where, params = SqlFilter().eq("m.clase_id", clase_id).eq("m.alumno_id", alumno_id).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{MARCAJE_SELECT} {where} ORDER BY m.fecha_hora DESC", params)
            return [row_to_marcaje(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        clase_id: str,
        alumno_id: str,
        estado: EstadoMarcaje,
        tipo_marcaje: TipoMarcaje,
        modificado_por: Optional[str],
        dispositivo_id: Optional[str] = None,
    ) -> str:
        marcaje_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO marcajes(id, clase_id, alumno_id, fecha_hora, estado, tipo_marcaje, modificado_por,
                                     dispositivo_id, created_at, updated_at)
                VALUES(%s,%s,%s,NOW(),%s,%s,%s,%s,NOW(),NOW())
                """,
                (marcaje_id, clase_id, alumno_id, estado.value, tipo_marcaje.value, modificado_por, dispositivo_id),
            )
        return marcaje_id

    def update_status(
        self, marcaje_id: str, *, estado: EstadoMarcaje, tipo_marcaje: TipoMarcaje, modificado_por: str
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE marcajes
                SET estado=%s, tipo_marcaje=%s, modificado_por=%s, updated_at=NOW()
                WHERE id=%s
                """,
                (estado.value, tipo_marcaje.value, modificado_por, marcaje_id),
            )
            return cur.rowcount > 0
