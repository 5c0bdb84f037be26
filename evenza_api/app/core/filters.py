"""
Typed query builder for listing endpoints.

Listings used to assemble ``WHERE`` clauses from loose strings.  Here
each listing declares the columns it may filter and sort on as a
``str`` enum, and a ``SelectQuery`` only accepts members of those
enums.  Column names therefore never come from request input; values
are always bound as parameters.

Example::

    query = SelectQuery("payments", PaymentField)
    query.where(PaymentField.STATUS, Op.EQ, "pending")
    query.search([PaymentField.RELATED_TITLE], "summit")
    query.order_by(PaymentField.CREATED_AT, descending=True)
    sql, params = query.page(limit=10, offset=0)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Type


class Op(str, Enum):
    EQ = "="
    NE = "!="
    GTE = ">="
    LTE = "<="
    CONTAINS = "LIKE"
    IN = "IN"


@dataclass(frozen=True)
class Condition:
    column: Enum
    op: Op
    value: Any

    def to_sql(self) -> Tuple[str, List[Any]]:
        if self.op is Op.IN:
            values = list(self.value)
            if not values:
                return "0", []
            placeholders = ", ".join("?" for _ in values)
            return f"{self.column.value} IN ({placeholders})", values
        if self.op is Op.CONTAINS:
            return f"{self.column.value} LIKE ?", [f"%{self.value}%"]
        return f"{self.column.value} {self.op.value} ?", [self.value]


@dataclass
class SelectQuery:
    """A ``SELECT`` over one table restricted to an enum of columns."""

    table: str
    fields: Type[Enum]
    conditions: List[Condition] = field(default_factory=list)
    any_of: List[List[Condition]] = field(default_factory=list)
    ordering: List[Tuple[Enum, bool]] = field(default_factory=list)

    def _check(self, column: Enum) -> None:
        if not isinstance(column, self.fields):
            raise TypeError(f"{column!r} is not a column of {self.table}")

    def where(self, column: Enum, op: Op, value: Any) -> "SelectQuery":
        self._check(column)
        self.conditions.append(Condition(column, op, value))
        return self

    def where_if(self, column: Enum, op: Op, value: Any) -> "SelectQuery":
        """Add the condition only when ``value`` is set."""
        if value is None or value == "":
            return self
        return self.where(column, op, value)

    def search(self, columns: Sequence[Enum], term: Optional[str]) -> "SelectQuery":
        """Case-insensitive match of ``term`` against any of ``columns``."""
        if not term:
            return self
        group = []
        for column in columns:
            self._check(column)
            group.append(Condition(column, Op.CONTAINS, term))
        self.any_of.append(group)
        return self

    def order_by(self, column: Enum, descending: bool = False) -> "SelectQuery":
        self._check(column)
        self.ordering.append((column, descending))
        return self

    def _where_sql(self) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for condition in self.conditions:
            sql, values = condition.to_sql()
            clauses.append(sql)
            params.extend(values)
        for group in self.any_of:
            parts = []
            for condition in group:
                sql, values = condition.to_sql()
                parts.append(sql)
                params.extend(values)
            clauses.append("(" + " OR ".join(parts) + ")")
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def select(self, columns: str = "*") -> Tuple[str, List[Any]]:
        where, params = self._where_sql()
        sql = f"SELECT {columns} FROM {self.table}{where}"
        if self.ordering:
            sql += " ORDER BY " + ", ".join(
                f"{column.value} {'DESC' if desc else 'ASC'}" for column, desc in self.ordering
            )
        return sql, params

    def page(self, limit: int, offset: int, columns: str = "*") -> Tuple[str, List[Any]]:
        sql, params = self.select(columns)
        return sql + " LIMIT ? OFFSET ?", params + [limit, offset]

    def count(self) -> Tuple[str, List[Any]]:
        where, params = self._where_sql()
        return f"SELECT COUNT(*) FROM {self.table}{where}", params


def fetch_page(conn, query: SelectQuery, limit: int, offset: int) -> Tuple[List[dict], int]:
    """Run ``query`` for one page and return ``(rows, total)``."""
    sql, params = query.count()
    total = conn.execute(sql, params).fetchone()[0]
    sql, params = query.page(limit, offset)
    rows = [dict(row) for row in conn.execute(sql, params).fetchall()]
    return rows, total
