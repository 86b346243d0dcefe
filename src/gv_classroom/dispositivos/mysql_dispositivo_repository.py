from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import EstadoDispositivo, EstadoResolucion, TipoDispositivo
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..sedes.model import Sala, Sede
from .model import (
    Dispositivo,
    DispositivoFilter,
    HistorialDispositivo,
    IncidenciaDispositivo,
    IncidenciaFilter,
)
from .repository import DispositivoRepository

_DEVICE_COLUMNS = """
    d.id AS d_id, d.serial_number, d.tipo, d.sala_id, d.sede_id, d.version_app, d.bateria,
    d.estado_conexion, d.ultima_conexion, d.created_at AS d_created_at, d.updated_at AS d_updated_at,
    s.codigo AS sala_codigo, s.nombre AS sala_nombre, s.sede_id AS sala_sede_id,
    se.codigo AS sede_codigo, se.nombre AS sede_nombre, se.timezone AS sede_timezone
"""

_DEVICE_JOINS = """
    LEFT JOIN salas s ON s.id = d.sala_id
    LEFT JOIN sedes se ON se.id = d.sede_id
"""

_INCIDENCIA_SELECT = f"""
    SELECT i.id, i.dispositivo_id, i.tipo_incidencia, i.descripcion, i.sede_original, i.sala_original,
           i.sede_homologada, i.sala_homologada, i.estado_resolucion, i.created_at, i.updated_at,
           {_DEVICE_COLUMNS}
    FROM incidencias_dispositivo i
    LEFT JOIN dispositivos d ON d.id = i.dispositivo_id
    {_DEVICE_JOINS}
"""


def row_to_dispositivo(r: dict) -> Dispositivo:
    sede = None
    if r.get("sede_nombre") is not None:
        sede = Sede(
            id=r["sede_id"],
            codigo=r.get("sede_codigo") or "",
            nombre=r["sede_nombre"],
            timezone=r.get("sede_timezone") or DEFAULT_TIMEZONE,
        )
    sala = None
    if r.get("sala_nombre") is not None:
        sala = Sala(id=r["sala_id"], codigo=r.get("sala_codigo") or "", nombre=r["sala_nombre"],
                    sede_id=r.get("sala_sede_id"))
    bateria = r.get("bateria")
    return Dispositivo(
        id=r["d_id"],
        serial_number=r["serial_number"],
        tipo=TipoDispositivo(r["tipo"]),
        sala_id=r.get("sala_id"),
        sede_id=r.get("sede_id"),
        version_app=r.get("version_app"),
        bateria=int(bateria) if bateria is not None else None,
        estado_conexion=EstadoDispositivo(r["estado_conexion"]),
        ultima_conexion=r.get("ultima_conexion"),
        created_at=r.get("d_created_at"),
        updated_at=r.get("d_updated_at"),
        sala=sala,
        sede=sede,
    )


def row_to_incidencia(r: dict) -> IncidenciaDispositivo:
    return IncidenciaDispositivo(
        id=r["id"],
        dispositivo_id=r["dispositivo_id"],
        tipo_incidencia=r["tipo_incidencia"],
        descripcion=r.get("descripcion"),
        sede_original=r.get("sede_original"),
        sala_original=r.get("sala_original"),
        sede_homologada=r.get("sede_homologada"),
        sala_homologada=r.get("sala_homologada"),
        estado_resolucion=EstadoResolucion(r["estado_resolucion"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        dispositivo=row_to_dispositivo(r) if r.get("d_id") else None,
    )


class MySQLDispositivoRepository(DispositivoRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_dispositivos(self, criteria: DispositivoFilter) -> Sequence[Dispositivo]:
        where, params = (
            SqlFilter()
            .eq("d.sala_id", criteria.sala_id)
            .eq("d.sede_id", criteria.sede_id)
            .eq("d.estado_conexion", criteria.estado)
            .build()
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DEVICE_COLUMNS} FROM dispositivos d {_DEVICE_JOINS} {where} ORDER BY d.serial_number",
                params,
            )
            return [row_to_dispositivo(r) for r in fetchall(cur)]

    def get_dispositivo(self, dispositivo_id: str) -> Optional[Dispositivo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DEVICE_COLUMNS} FROM dispositivos d {_DEVICE_JOINS} WHERE d.id=%s", (dispositivo_id,))
            row = fetchone(cur)
            return row_to_dispositivo(row) if row else None

    def count_dispositivos(self, *, estado: Optional[EstadoDispositivo] = None) -> int:
        where, params = SqlFilter().eq("estado_conexion", estado).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM dispositivos {where}", params)
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def list_incidencias(self, criteria: IncidenciaFilter) -> Sequence[IncidenciaDispositivo]:
        where, params = (
            SqlFilter()
            .eq("i.estado_resolucion", criteria.estado)
            .date_between("i.created_at", criteria.desde, criteria.hasta)
            .build()
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_INCIDENCIA_SELECT} {where} ORDER BY i.created_at DESC", params)
            return [row_to_incidencia(r) for r in fetchall(cur)]

    def get_incidencia(self, incidencia_id: str) -> Optional[IncidenciaDispositivo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_INCIDENCIA_SELECT} WHERE i.id=%s", (incidencia_id,))
            row = fetchone(cur)
            return row_to_incidencia(row) if row else None

    def count_incidencias(self, *, estado: Optional[EstadoResolucion] = None) -> int:
        where, params = SqlFilter().eq("estado_resolucion", estado).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM incidencias_dispositivo {where}", params)
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def resolve_incidencia(self, incidencia_id: str, *, sede_homologada: str, sala_homologada: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE incidencias_dispositivo
                SET sede_homologada=%s, sala_homologada=%s, estado_resolucion=%s, updated_at=NOW()
                WHERE id=%s
                """,
                (sede_homologada, sala_homologada, EstadoResolucion.RESUELTO.value, incidencia_id),
            )
            return cur.rowcount > 0

    def append_historial(
        self,
        *,
        dispositivo_id: str,
        accion: str,
        descripcion: Optional[str] = None,
        sede_anterior: Optional[str] = None,
        sala_anterior: Optional[str] = None,
        sede_nueva: Optional[str] = None,
        sala_nueva: Optional[str] = None,
        estado_anterior: Optional[str] = None,
        estado_nuevo: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> str:
        historial_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO historial_dispositivos(id, dispositivo_id, accion, descripcion, sede_anterior,
                    sala_anterior, sede_nueva, sala_nueva, estado_anterior, estado_nuevo, actor_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,NOW())
                """,
                (
                    historial_id,
                    dispositivo_id,
                    accion,
                    descripcion,
                    sede_anterior,
                    sala_anterior,
                    sede_nueva,
                    sala_nueva,
                    estado_anterior,
                    estado_nuevo,
                    actor_id,
                ),
            )
        return historial_id

    def list_historial(self, dispositivo_id: str) -> Sequence[HistorialDispositivo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, dispositivo_id, accion, descripcion, sede_anterior, sala_anterior, sede_nueva,
                       sala_nueva, estado_anterior, estado_nuevo, actor_id, created_at
                FROM historial_dispositivos
                WHERE dispositivo_id=%s
                ORDER BY created_at DESC
                """,
                (dispositivo_id,),
            )
            return [HistorialDispositivo(**r) for r in fetchall(cur)]
