from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AuditAction
from .model import AuditEntry


class AuditRepository(Protocol):
    """Append-only: there is deliberately no update or delete."""

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
        raise NotImplementedError

    def list_entries(
        self, *, entity: Optional[str] = None, entity_id: Optional[str] = None, limit: int = 500
    ) -> Sequence[AuditEntry]:
        raise NotImplementedError
