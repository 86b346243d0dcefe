from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """Append-only record of one mutation of a tracked entity."""

    id: str
    actor_id: Optional[str]
    action: AuditAction
    entity: str
    entity_id: str
    before: Optional[Any]
    after: Optional[Any]
    created_at: Optional[datetime] = None
