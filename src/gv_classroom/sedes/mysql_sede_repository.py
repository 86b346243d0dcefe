from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Sala, Sede
from .repository import SedeRepository

_SALA_SELECT = """
    SELECT s.id, s.codigo, s.nombre, s.sede_id, s.created_at, s.updated_at,
           se.codigo AS sede_codigo, se.nombre AS sede_nombre, se.timezone AS sede_timezone
    FROM salas s
    LEFT JOIN sedes se ON se.id = s.sede_id
"""


def row_to_sede(r: dict) -> Sede:
    return Sede(
        id=r["id"],
        codigo=r["codigo"],
        nombre=r["nombre"],
        timezone=r.get("timezone") or DEFAULT_TIMEZONE,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def row_to_sala(r: dict) -> Sala:
    sede = None
    if r.get("sede_nombre") is not None:
        sede = Sede(id=r["sede_id"], codigo=r.get("sede_codigo") or "", nombre=r["sede_nombre"],
                    timezone=r.get("sede_timezone") or DEFAULT_TIMEZONE)
    return Sala(
        id=r["id"],
        codigo=r["codigo"],
        nombre=r["nombre"],
        sede_id=r["sede_id"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        sede=sede,
    )


class MySQLSedeRepository(SedeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_sedes(self) -> Sequence[Sede]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, codigo, nombre, timezone, created_at, updated_at FROM sedes ORDER BY nombre")
            return [row_to_sede(r) for r in fetchall(cur)]

    def get_sede(self, sede_id: str) -> Optional[Sede]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, codigo, nombre, timezone, created_at, updated_at FROM sedes WHERE id=%s",
                (sede_id,),
            )
            row = fetchone(cur)
            return row_to_sede(row) if row else None

    def list_salas(self, *, sede_id: Optional[str] = None) -> Sequence[Sala]:
        where, params = SqlFilter().eq("s.sede_id", sede_id).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SALA_SELECT} {where} ORDER BY s.nombre", params)
            return [row_to_sala(r) for r in fetchall(cur)]

    def get_sala(self, sala_id: str) -> Optional[Sala]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SALA_SELECT} WHERE s.id=%s", (sala_id,))
            row = fetchone(cur)
            return row_to_sala(row) if row else None
