from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple


class SqlFilter:
    """Compose optional criteria into a parameterised WHERE clause.

    Criteria whose value is None are skipped, so list queries can pass the
    parsed query-string filters through unchanged.

        f = SqlFilter().eq("c.sala_id", sala_id).between("c.fecha", desde, hasta)
        where, params = f.build()
    """

    def __init__(self) -> None:
        self._clauses: List[str] = []
        self._params: List[Any] = []

    def eq(self, column: str, value: Any) -> "SqlFilter":
        if value is not None:
            self._clauses.append(f"{column} = %s")
            self._params.append(getattr(value, "value", value))
        return self

    def in_(self, column: str, values: Optional[Sequence[Any]]) -> "SqlFilter":
        if values:
            marks = ", ".join(["%s"] * len(values))
            self._clauses.append(f"{column} IN ({marks})")
            self._params.extend(getattr(v, "value", v) for v in values)
        return self

    def gte(self, column: str, value: Any) -> "SqlFilter":
        if value is not None:
            self._clauses.append(f"{column} >= %s")
            self._params.append(value)
        return self

    def lte(self, column: str, value: Any) -> "SqlFilter":
        if value is not None:
            self._clauses.append(f"{column} <= %s")
            self._params.append(value)
        return self

    def between(self, column: str, start: Any, end: Any) -> "SqlFilter":
        """Inclusive range; applied only when both ends are given."""

        if start is not None and end is not None:
            self._clauses.append(f"{column} BETWEEN %s AND %s")
            self._params.extend([start, end])
        return self

    def date_between(self, column: str, start: Any, end: Any) -> "SqlFilter":
        """Like ``between`` but compares the DATE part of a DATETIME column."""

        return self.between(f"DATE({column})", start, end)

    def build(self) -> Tuple[str, Tuple[Any, ...]]:
        if not self._clauses:
            return "", ()
        return "WHERE " + " AND ".join(self._clauses), tuple(self._params)
