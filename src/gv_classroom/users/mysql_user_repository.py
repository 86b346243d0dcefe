from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..perfiles.model import Perfil
from ..sedes.model import Sede
from .model import Usuario
from .repository import UserRepository

_UPDATABLE = ("rut", "nombre", "email", "password_hash", "tipo", "perfil_id", "sede_id", "timezone", "activo")

_SELECT = """
    SELECT u.id, u.rut, u.nombre, u.email, u.password_hash, u.tipo, u.perfil_id, u.sede_id,
           u.timezone, u.activo, u.created_at, u.updated_at,
           p.nombre AS perfil_nombre, p.descripcion AS perfil_descripcion, p.permisos AS perfil_permisos,
           s.codigo AS sede_codigo, s.nombre AS sede_nombre, s.timezone AS sede_timezone
    FROM usuarios u
    LEFT JOIN perfiles p ON p.id = u.perfil_id
    LEFT JOIN sedes s ON s.id = u.sede_id
"""


def row_to_usuario(r: dict) -> Usuario:
    perfil = None
    if r.get("perfil_id") and r.get("perfil_nombre") is not None:
        perfil = Perfil(
            id=r["perfil_id"],
            nombre=r["perfil_nombre"],
            descripcion=r.get("perfil_descripcion"),
            permisos=r.get("perfil_permisos") or "[]",
        )
    sede = None
    if r.get("sede_id") and r.get("sede_nombre") is not None:
        sede = Sede(
            id=r["sede_id"],
            codigo=r.get("sede_codigo") or "",
            nombre=r["sede_nombre"],
            timezone=r.get("sede_timezone") or DEFAULT_TIMEZONE,
        )
    return Usuario(
        id=r["id"],
        rut=r["rut"],
        nombre=r["nombre"],
        email=r.get("email"),
        password_hash=r["password_hash"],
        tipo=Role(r["tipo"]),
        perfil_id=r.get("perfil_id"),
        sede_id=r.get("sede_id"),
        timezone=r.get("timezone") or DEFAULT_TIMEZONE,
        activo=bool(r.get("activo", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        perfil=perfil,
        sede=sede,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[Usuario]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE u.id=%s", (user_id,))
            row = fetchone(cur)
            return row_to_usuario(row) if row else None

    def get_by_rut(self, rut: str) -> Optional[Usuario]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE u.rut=%s", (rut,))
            row = fetchone(cur)
            return row_to_usuario(row) if row else None

    def list_users(self, *, tipo: Optional[Role] = None) -> Sequence[Usuario]:
        where, params = SqlFilter().eq("u.tipo", tipo).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY u.nombre", params)
            return [row_to_usuario(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        rut: str,
        nombre: str,
        email: Optional[str],
        password_hash: str,
        tipo: Role,
        perfil_id: Optional[str],
        sede_id: Optional[str],
        timezone: str,
        activo: bool,
    ) -> str:
        user_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO usuarios(id, rut, nombre, email, password_hash, tipo, perfil_id, sede_id,
                                     timezone, activo, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,NOW(),NOW())
                """,
                (user_id, rut, nombre, email, password_hash, tipo.value, perfil_id, sede_id, timezone, int(activo)),
            )
        return user_id

    def update_user(self, user_id: str, *, changes: dict) -> bool:
        cols = [c for c in _UPDATABLE if c in changes]
        if not cols:
            return self.get_by_id(user_id) is not None
        values = []
        for c in cols:
            v = changes[c]
            if isinstance(v, Role):
                v = v.value
            elif isinstance(v, bool):
                v = int(v)
            values.append(v)
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE usuarios SET {assignments}, updated_at=NOW() WHERE id=%s", (*values, user_id))
            return cur.rowcount > 0

    def count(self, *, activo: Optional[bool] = None) -> int:
        where, params = SqlFilter().eq("activo", None if activo is None else int(activo)).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM usuarios {where}", params)
            row = fetchone(cur)
            return int(row["n"]) if row else 0
