from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError

DATE_FORMAT_HINT = "YYYY-MM-DD"


def parse_query_date(value: Optional[str], field_name: str) -> Optional[date]:
    """Optional ``?fecha=``-style parameter; a full ISO timestamp is cut to its date."""

    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        message = f"fecha invalida ({DATE_FORMAT_HINT})"
        raise ValidationError(f"{field_name}: {message}", details=[{"path": field_name, "message": message}])


def now_local() -> datetime:
    # server clock; the dashboard's "today" follows it
    return datetime.now()
