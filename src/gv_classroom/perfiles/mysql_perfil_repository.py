from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Perfil, Permiso
from .repository import PerfilRepository

_UPDATABLE = ("nombre", "descripcion", "permisos")


def row_to_perfil(r: dict) -> Perfil:
    return Perfil(
        id=r["id"],
        nombre=r["nombre"],
        descripcion=r.get("descripcion"),
        permisos=r.get("permisos") or "[]",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _row_to_permiso(r: dict) -> Permiso:
    return Permiso(id=r["id"], codigo=r["codigo"], nombre=r["nombre"], modulo=r["modulo"])


class MySQLPerfilRepository(PerfilRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Perfil]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, nombre, descripcion, permisos, created_at, updated_at FROM perfiles ORDER BY nombre"
            )
            return [row_to_perfil(r) for r in fetchall(cur)]

    def get_by_id(self, perfil_id: str) -> Optional[Perfil]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, nombre, descripcion, permisos, created_at, updated_at FROM perfiles WHERE id=%s",
                (perfil_id,),
            )
            row = fetchone(cur)
            return row_to_perfil(row) if row else None

    def create(self, *, nombre: str, descripcion: Optional[str], permisos: str) -> str:
        perfil_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO perfiles(id, nombre, descripcion, permisos, created_at, updated_at)
                VALUES(%s,%s,%s,%s,NOW(),NOW())
                """,
                (perfil_id, nombre, descripcion, permisos),
            )
        return perfil_id

    def update(self, perfil_id: str, *, changes: dict) -> bool:
        cols = [c for c in _UPDATABLE if c in changes]
        if not cols:
            return self.get_by_id(perfil_id) is not None
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE perfiles SET {assignments}, updated_at=NOW() WHERE id=%s",
                tuple(changes[c] for c in cols) + (perfil_id,),
            )
            return cur.rowcount > 0

    def list_permisos(self) -> Sequence[Permiso]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, codigo, nombre, modulo FROM permisos ORDER BY modulo, codigo")
            return [_row_to_permiso(r) for r in fetchall(cur)]

    def list_linked_permisos(self, perfil_id: str) -> Sequence[Permiso]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.id, p.codigo, p.nombre, p.modulo
                FROM perfil_permisos pp
                JOIN permisos p ON p.id = pp.permiso_id
                WHERE pp.perfil_id=%s
                ORDER BY p.modulo, p.codigo
                """,
                (perfil_id,),
            )
            return [_row_to_permiso(r) for r in fetchall(cur)]

    def replace_linked_permisos(self, perfil_id: str, codigos: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM perfil_permisos WHERE perfil_id=%s", (perfil_id,))
            if not codigos:
                return 0
            marks = ", ".join(["%s"] * len(codigos))
            cur.execute(
                f"""
                INSERT INTO perfil_permisos(perfil_id, permiso_id)
                SELECT %s, id FROM permisos WHERE codigo IN ({marks})
                """,
                (perfil_id, *codigos),
            )
            return int(cur.rowcount)
