from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import EstadoClase
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import as_date, as_hhmm, db_cursor, fetchall, fetchone
from ..marcajes.model import Marcaje
from ..marcajes.mysql_marcaje_repository import MARCAJE_SELECT, row_to_marcaje
from ..sedes.model import Sala, Sede
from ..users.model import PersonaResumen
from .model import Clase, ClaseFilter, Inscripcion
from .repository import ClaseRepository

_SELECT = """
    SELECT c.id, c.codigo, c.asignatura, c.profesor_id, c.sala_id, c.fecha, c.hora_inicio, c.hora_fin,
           c.estado, c.created_at, c.updated_at,
           u.nombre AS profesor_nombre, u.rut AS profesor_rut, u.email AS profesor_email,
           s.codigo AS sala_codigo, s.nombre AS sala_nombre, s.sede_id AS sala_sede_id,
           se.codigo AS sede_codigo, se.nombre AS sede_nombre, se.timezone AS sede_timezone
    FROM clases c
    LEFT JOIN usuarios u ON u.id = c.profesor_id
    LEFT JOIN salas s ON s.id = c.sala_id
    LEFT JOIN sedes se ON se.id = s.sede_id
"""


def row_to_clase(r: dict) -> Clase:
    profesor = None
    if r.get("profesor_nombre") is not None:
        profesor = PersonaResumen(
            id=r["profesor_id"], nombre=r["profesor_nombre"], rut=r["profesor_rut"], email=r.get("profesor_email")
        )
    sala = None
    if r.get("sala_nombre") is not None:
        sede = None
        if r.get("sede_nombre") is not None:
            sede = Sede(
                id=r["sala_sede_id"],
                codigo=r.get("sede_codigo") or "",
                nombre=r["sede_nombre"],
                timezone=r.get("sede_timezone") or DEFAULT_TIMEZONE,
            )
        sala = Sala(id=r["sala_id"], codigo=r.get("sala_codigo") or "", nombre=r["sala_nombre"],
                    sede_id=r.get("sala_sede_id"), sede=sede)
    return Clase(
        id=r["id"],
        codigo=r["codigo"],
        asignatura=r["asignatura"],
        profesor_id=r["profesor_id"],
        sala_id=r["sala_id"],
        fecha=as_date(r["fecha"]),
        hora_inicio=as_hhmm(r["hora_inicio"]),
        hora_fin=as_hhmm(r["hora_fin"]),
        estado=EstadoClase(r["estado"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        profesor=profesor,
        sala=sala,
    )


class MySQLClaseRepository(ClaseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _attach(self, cur, clases: List[Clase], *, with_marcajes: bool) -> List[Clase]:
        if not clases:
            return clases
        ids = [c.id for c in clases]
        marks = ", ".join(["%s"] * len(ids))

        cur.execute(
            f"""
            SELECT i.id, i.clase_id, i.alumno_id, i.created_at, u.nombre, u.rut
            FROM inscripciones i
            JOIN usuarios u ON u.id = i.alumno_id
            WHERE i.clase_id IN ({marks})
            ORDER BY u.nombre
            """,
            tuple(ids),
        )
        inscripciones: Dict[str, list] = defaultdict(list)
        for r in fetchall(cur):
            inscripciones[r["clase_id"]].append(
                Inscripcion(
                    id=r["id"],
                    clase_id=r["clase_id"],
                    alumno_id=r["alumno_id"],
                    created_at=r.get("created_at"),
                    alumno=PersonaResumen(id=r["alumno_id"], nombre=r["nombre"], rut=r["rut"]),
                )
            )

        marcajes: Dict[str, List[Marcaje]] = defaultdict(list)
        if with_marcajes:
            cur.execute(f"{MARCAJE_SELECT} WHERE m.clase_id IN ({marks}) ORDER BY m.fecha_hora DESC", tuple(ids))
            for r in fetchall(cur):
                m = row_to_marcaje(r)
                marcajes[m.clase_id].append(m)

        return [
            replace(c, inscripciones=tuple(inscripciones[c.id]), marcajes=tuple(marcajes[c.id]))
            for c in clases
        ]

    def list_clases(
        self, criteria: ClaseFilter, *, newest_first: bool = False, with_marcajes: bool = True
    ) -> Sequence[Clase]:
        desde, hasta = criteria.date_range()
        where, params = (
            SqlFilter()
            .eq("c.profesor_id", criteria.profesor_id)
            .eq("c.sala_id", criteria.sala_id)
            .eq("c.estado", criteria.estado)
            .between("c.fecha", desde, hasta)
            .build()
        )
        order = "c.fecha DESC, c.hora_inicio ASC" if newest_first else "c.fecha ASC, c.hora_inicio ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY {order}", params)
            clases = [row_to_clase(r) for r in fetchall(cur)]
            return self._attach(cur, clases, with_marcajes=with_marcajes)

    def list_for_alumno(
        self, alumno_id: str, *, desde: Optional[date] = None, hasta: Optional[date] = None
    ) -> Sequence[Clase]:
        where, params = SqlFilter().eq("i.alumno_id", alumno_id).between("c.fecha", desde, hasta).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                JOIN inscripciones i ON i.clase_id = c.id
                {where}
                ORDER BY c.fecha ASC, c.hora_inicio ASC
                """,
                params,
            )
            return [row_to_clase(r) for r in fetchall(cur)]

    def get_detail(self, clase_id: str) -> Optional[Clase]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE c.id=%s", (clase_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._attach(cur, [row_to_clase(row)], with_marcajes=True)[0]

    def list_recent(self, limit: int) -> Sequence[Clase]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY c.fecha DESC LIMIT %s", (int(limit),))
            return [row_to_clase(r) for r in fetchall(cur)]

    def count_on(self, day: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM clases WHERE fecha=%s", (day,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
