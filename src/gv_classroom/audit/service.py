from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..core.enums import AuditAction
from ..core.exceptions import AuditWriteError
from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditTrail:
    """Use case: append audit rows after a primary write.

    The primary write and the audit insert are two statements, not one
    transaction. When the insert fails the caller gets ``AuditWriteError``
    so the response can say the change was applied but not audited.
    """

    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(
        self,
        *,
        actor_id: Optional[str],
        action: AuditAction,
        entity: str,
        entity_id: str,
        before: Optional[Any],
        after: Optional[Any],
    ) -> str:
        try:
            return self._audit.append(
                actor_id=actor_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                before=before,
                after=after,
            )
        except Exception as exc:
            logger.exception("No se pudo registrar auditoria %s %s/%s", action.value, entity, entity_id)
            raise AuditWriteError(
                f"El cambio en {entity} {entity_id} fue aplicado pero no se pudo registrar la auditoria"
            ) from exc

    def list_entries(self, *, entity: Optional[str] = None, entity_id: Optional[str] = None) -> Sequence[AuditEntry]:
        return self._audit.list_entries(entity=entity, entity_id=entity_id)
