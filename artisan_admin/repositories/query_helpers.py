"""
Small helpers shared by repositories that build filtered, sorted, paginated
SELECT statements.
"""
from typing import Any, Optional


class WhereBuilder:
    """Accumulates AND-ed SQL conditions with their positional parameters."""

    def __init__(self) -> None:
        self._clauses: list[str] = []
        self.params: list[Any] = []

    def equals(self, column: str, value: Any) -> "WhereBuilder":
        if value is not None:
            self._clauses.append(f"{column} = ?")
            self.params.append(value)
        return self

    def contains_any(self, columns: list[str], term: Optional[str]) -> "WhereBuilder":
        """Substring match of *term* against any of *columns* (SQL LIKE)."""
        if term:
            self._clauses.append(
                "(" + " OR ".join(f"{col} LIKE ?" for col in columns) + ")"
            )
            self.params.extend([f"%{term}%"] * len(columns))
        return self

    def sql(self) -> str:
        if not self._clauses:
            return ""
        return "WHERE " + " AND ".join(self._clauses)


def order_by_clause(
    sort_by: Optional[str],
    sort_order: Optional[str],
    allowed: dict[str, str],
    default_column: str = "created_at",
    tie_breaker: str = "id",
) -> str:
    """
    Map an API sort key to a column through the *allowed* table.

    A missing key sorts by *default_column* in the requested direction
    (descending unless ``asc``). An unknown key falls back to
    *default_column* descending. *tie_breaker* keeps pages stable when sort
    values are equal.
    """
    if sort_by is None:
        column = default_column
    else:
        column = allowed.get(sort_by)
        if column is None:
            return f"ORDER BY {default_column} DESC, {tie_breaker} DESC"
    direction = "ASC" if (sort_order or "").strip().lower() == "asc" else "DESC"
    return f"ORDER BY {column} {direction}, {tie_breaker} {direction}"
