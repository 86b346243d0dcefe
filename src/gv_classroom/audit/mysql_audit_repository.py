from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.filters import SqlFilter
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json, new_id
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        actor_id: Optional[str],
        action: AuditAction,
        entity: str,
        entity_id: str,
        before: Optional[Any],
        after: Optional[Any],
    ) -> str:
        entry_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(id, actor_id, action, entity, entity_id, before_data, after_data, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,NOW())
                """,
                (entry_id, actor_id, action.value, entity, entity_id, dump_json(before), dump_json(after)),
            )
        return entry_id

    def list_entries(
        self, *, entity: Optional[str] = None, entity_id: Optional[str] = None, limit: int = 500
    ) -> Sequence[AuditEntry]:
        where, params = SqlFilter().eq("entity", entity).eq("entity_id", entity_id).build()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, actor_id, action, entity, entity_id, before_data, after_data, created_at
                FROM audit_log
                {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (*params, int(limit)),
            )
            return [
                AuditEntry(
                    id=r["id"],
                    actor_id=r.get("actor_id"),
                    action=AuditAction(r["action"]),
                    entity=r["entity"],
                    entity_id=r["entity_id"],
                    before=load_json(r.get("before_data")),
                    after=load_json(r.get("after_data")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
